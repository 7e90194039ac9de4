"""User commands.

``USER`` arguments accept an ID (``U024BE7LH``), a handle with ``@``, or a
bare handle.
"""

from __future__ import annotations

from typing import Optional

import typer

from clack.models import User
from clack.output import format_response
from clack.runtime import cell, emit_records, open_client


users_app = typer.Typer(no_args_is_help=True)

USER_HEADERS = ["ID", "Handle", "Name", "Email", "Flags"]


def user_row(user: User) -> list[str]:
    flags = [
        label
        for label, on in (
            ("bot", user.is_bot),
            ("admin", user.is_admin),
            ("owner", user.is_owner),
            ("deleted", user.deleted),
        )
        if on
    ]
    return [
        user.id,
        user.name,
        cell(user.profile.display_name or user.real_name),
        cell(user.profile.email),
        ",".join(flags),
    ]


@users_app.command("list")
def users_list(
    ctx: typer.Context,
    include_deleted: bool = typer.Option(
        False, "--include-deleted", help="Include deactivated accounts."
    ),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum users to show."),
) -> None:
    """List workspace members.

    Example::

        clack users list --limit 50
    """
    from clack.api.users import list_users

    with open_client(ctx) as client:
        users = list_users(client, include_deleted=include_deleted, limit=limit)
    emit_records(users, USER_HEADERS, user_row, title="Users")


@users_app.command("info")
def users_info(
    ctx: typer.Context,
    user: str = typer.Argument(help="User ID, @handle or handle."),
) -> None:
    """Show one user."""
    from clack.api.resolver import resolve_user
    from clack.api.users import get_user

    with open_client(ctx) as client:
        record = get_user(client, resolve_user(client, user))
    format_response(record)


@users_app.command("profile")
def users_profile(
    ctx: typer.Context,
    user: Optional[str] = typer.Argument(None, help="User ID, @handle or handle (default: you)."),
) -> None:
    """Show a user's profile (yours when USER is omitted)."""
    from clack.api.resolver import resolve_user
    from clack.api.users import get_profile

    with open_client(ctx) as client:
        user_id = resolve_user(client, user) if user else None
        profile = get_profile(client, user_id)
    format_response(profile)
