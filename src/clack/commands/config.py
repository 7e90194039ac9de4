"""Config commands -- view and modify global configuration.

Provides the ``clack config`` sub-command group for reading, updating, and
resetting the user's global configuration file
(:class:`~clack.models.GlobalConfig`). Settings control the API base URL,
the token source, request timeouts and retries, cache TTLs, and the default
output format.
"""

from __future__ import annotations

import typer

from clack.output import format_response, info, success
from clack.runtime import cli_options, fail_with_exit_code


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Example::

        clack config show
        clack --json config show
    """
    from clack.config import global_config_path, load_global_config

    with fail_with_exit_code():
        config = load_global_config()
    info(f"Config file: {global_config_path()}")
    format_response(config)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g., 'cache.users_ttl_seconds')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the existing field (bool, int or
    str) and the whole config is re-validated before it is saved.

    Example::

        clack config set output.format json
        clack config set cache.messages_ttl_seconds 3600
        clack config set token_source file:~/.slack-token
    """
    from clack.config import load_global_config, save_global_config, set_config_value

    with fail_with_exit_code():
        config = set_config_value(load_global_config(), key, value)
    save_global_config(config)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.
    """
    from clack.config import save_global_config
    from clack.models import GlobalConfig

    if not cli_options(ctx).get("force"):
        if not typer.confirm("Reset all config to defaults?"):
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
