"""Glue between the Typer commands and the access layer.

:func:`open_client` turns the global CLI options stored on the Typer
context into a ready :class:`~clack.api.context.ClientContext`: it resolves
configuration and the token, opens the cache and the dispatcher, and
initialises the workspace session. Any :class:`~clack.exceptions.ClackError`
raised inside the ``with`` block is printed and converted into the error's
exit code.

:func:`emit_records` renders a list of records as a table for humans, or
as full objects in JSON / YAML mode.
"""

from __future__ import annotations

import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Callable, Optional

import typer

from clack.api.context import ClientContext
from clack.api.session import WorkspaceSession
from clack.cache.freshness import FreshnessPolicy
from clack.cache.store import LocalStore
from clack.client.dispatcher import Dispatcher
from clack.config import get_cache_db_path, resolve_config, resolve_token
from clack.exceptions import CacheError, ClackError
from clack.models import GlobalConfig
from clack.output import OutputFormat, debug, error, format_response, get_output, print_table


def cli_options(ctx: typer.Context) -> dict[str, Any]:
    """Return the dict of global options set by the root callback."""
    root = ctx.find_root()
    return root.obj if isinstance(root.obj, dict) else {}


def open_store(config: GlobalConfig, policy: FreshnessPolicy) -> Optional[LocalStore]:
    """Open the cache database, or return ``None`` when disabled or unusable."""
    if not config.cache.enabled:
        debug("[cache] Disabled by configuration")
        return None
    try:
        return LocalStore.open(get_cache_db_path(), policy=policy)
    except CacheError as exc:
        debug(f"[cache] Unavailable, continuing without cache: {exc}")
        return None


@contextmanager
def fail_with_exit_code() -> Iterator[None]:
    """Print a :class:`ClackError` and exit with its code."""
    try:
        yield
    except ClackError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@contextmanager
def open_client(ctx: typer.Context) -> Iterator[ClientContext]:
    """Yield an initialised :class:`ClientContext` for one command.

    Recognised keys in the root context object: ``base_url``, ``refresh``,
    and, for tests, ``transport`` (an httpx transport) and ``sleep``.
    """
    opts = cli_options(ctx)
    with fail_with_exit_code():
        config = resolve_config(cli_base_url=opts.get("base_url"))
        token = resolve_token(config.token_source)
        policy = FreshnessPolicy.from_config(config.cache)
        store = open_store(config, policy)
        sleep: Callable[[float], None] = opts.get("sleep") or time.sleep

        with Dispatcher(
            config.base_url,
            token,
            timeout=config.request.timeout,
            max_retries=config.request.max_retries,
            transport=opts.get("transport"),
            sleep=sleep,
        ) as dispatcher:
            session = WorkspaceSession(dispatcher)
            yield session.context(
                store=store,
                policy=policy,
                refresh=bool(opts.get("refresh", False)),
                page_size=config.request.page_size,
            )


def wants_structured() -> bool:
    return get_output().format in (OutputFormat.JSON, OutputFormat.YAML)


def emit_records(
    records: Sequence[Any],
    headers: list[str],
    row: Callable[[Any], list[str]],
    title: Optional[str] = None,
) -> None:
    """Print *records*: full objects for JSON / YAML, a table otherwise."""
    if wants_structured():
        format_response(list(records))
    else:
        print_table(headers, [row(record) for record in records], title=title)


def cell(value: Any) -> str:
    """Render an optional value for a table cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)
