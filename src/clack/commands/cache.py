"""Cache commands -- inspect and clear the local SQLite cache.

The cache lives at ``$XDG_CACHE_HOME/clack/cache.db``. Deleting it is
always safe; the next command refetches what it needs.

Example::

    clack cache stats
    clack cache clear           # current workspace only
    clack cache clear --all     # every workspace
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from clack.output import format_response, info, success
from clack.runtime import cli_options, fail_with_exit_code, open_client

if TYPE_CHECKING:
    from clack.cache.store import LocalStore


cache_app = typer.Typer(no_args_is_help=True)


def _open_local_store() -> LocalStore:
    from clack.cache.store import LocalStore
    from clack.config import get_cache_db_path

    return LocalStore.open(get_cache_db_path())


@cache_app.command("stats")
def cache_stats() -> None:
    """Show row counts per table, the file location and the schema version."""
    with fail_with_exit_code():
        store = _open_local_store()
        stats = store.stats()
    format_response(stats)


@cache_app.command("clear")
def cache_clear(
    ctx: typer.Context,
    all_workspaces: bool = typer.Option(False, "--all", help="Clear every workspace."),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Delete cached rows for the current workspace (or all with ``--all``)."""
    force = force or bool(cli_options(ctx).get("force"))
    scope = "all workspaces" if all_workspaces else "the current workspace"
    if not force and not typer.confirm(f"Clear cached data for {scope}?"):
        info("Cancelled.")
        raise typer.Exit()

    if all_workspaces:
        with fail_with_exit_code():
            removed = _open_local_store().clear_all()
    else:
        with open_client(ctx) as client:
            store = client.store or _open_local_store()
            removed = store.clear_workspace(client.workspace_id)
    success(f"Removed {removed} cached rows from {scope}.")
