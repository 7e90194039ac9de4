"""Typer application and CLI entry point for clack.

This module builds the top-level Typer application, registers every
sub-command group, and defines the root callback that turns global flags
into an :class:`~clack.output.OutputManager` and a shared options dict.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs the SIGINT handler, invokes the Typer app,
maps :class:`~clack.exceptions.ClackError` to its exit code, and writes a
crash log for anything unexpected.

See Also:
    :mod:`clack.runtime`: Builds the access context each command runs against.
    :mod:`clack.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from clack import __version__
from clack.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="clack",
    help="Cache-aware command-line client for the Slack Web API.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Sub-commands
# ------------------------------------------------------------------ #

from clack.commands.auth import auth_app  # noqa: E402
from clack.commands.cache import cache_app  # noqa: E402
from clack.commands.chat import chat_app  # noqa: E402
from clack.commands.config import config_app  # noqa: E402
from clack.commands.conversations import conversations_app  # noqa: E402
from clack.commands.files import files_app  # noqa: E402
from clack.commands.pins import pins_app  # noqa: E402
from clack.commands.reactions import reactions_app  # noqa: E402
from clack.commands.search import search_app  # noqa: E402
from clack.commands.users import users_app  # noqa: E402

app.add_typer(auth_app, name="auth", help="Check the API token.")
app.add_typer(users_app, name="users", help="List and look up users.")
app.add_typer(conversations_app, name="conversations", help="Channels, history and threads.")
app.add_typer(search_app, name="search", help="Search messages, files and channels.")
app.add_typer(pins_app, name="pins", help="List, add and remove pins.")
app.add_typer(reactions_app, name="reactions", help="Add and remove reactions.")
app.add_typer(chat_app, name="chat", help="Post messages.")
app.add_typer(files_app, name="files", help="List and inspect files.")
app.add_typer(cache_app, name="cache", help="Inspect and clear the local cache.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"clack {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    yaml_output: bool = typer.Option(False, "--yaml", help="YAML output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show requests and cache activity on stderr."
    ),
    refresh_cache: bool = typer.Option(
        False, "--refresh-cache", help="Ignore cached data for this command (results are still cached)."
    ),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override the API base URL."),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
    output_file: Optional[str] = typer.Option(None, "-o", "--output", help="Output file path."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~clack.output.OutputManager` and stores the
    shared options in ``ctx.obj`` for :func:`~clack.runtime.open_client`.
    The output format comes from the flags, falling back to the
    ``output.format`` config setting.
    """
    from clack.config import load_global_config
    from clack.exceptions import ConfigError
    from clack.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif yaml_output:
        fmt = OutputFormat.YAML
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        # A broken config file must not block `config reset`.
        try:
            fmt = OutputFormat(load_global_config().output.format)
        except (ValueError, ConfigError):
            fmt = OutputFormat.AUTO

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)

    ctx.ensure_object(dict)
    ctx.obj["refresh"] = refresh_cache
    ctx.obj["base_url"] = base_url
    ctx.obj["force"] = force


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to the data directory and return its path."""
    from clack.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``clack`` console script.

    :class:`~clack.exceptions.ClackError` instances that escape a command
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from clack.exceptions import ClackError
        from clack.output import error

        if isinstance(exc, ClackError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
