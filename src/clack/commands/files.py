"""File commands."""

from __future__ import annotations

from typing import Optional

import typer

from clack.models import File
from clack.output import format_response
from clack.runtime import cell, emit_records, open_client


files_app = typer.Typer(no_args_is_help=True)

FILE_HEADERS = ["ID", "Name", "Type", "Size", "User"]


def file_row(f: File) -> list[str]:
    return [f.id, cell(f.name or f.title), cell(f.pretty_type or f.filetype), cell(f.size), cell(f.user)]


@files_app.command("list")
def files_list(
    ctx: typer.Context,
    user: Optional[str] = typer.Option(None, "--user", help="Only files uploaded by this user."),
    channel: Optional[str] = typer.Option(None, "--channel", help="Only files shared here."),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum files to show."),
) -> None:
    """List recent files."""
    from clack.api.files import list_files
    from clack.api.resolver import resolve_conversation, resolve_user

    with open_client(ctx) as client:
        user_id = resolve_user(client, user) if user else None
        channel_id = resolve_conversation(client, channel) if channel else None
        files = list_files(client, limit=limit, user=user_id, channel=channel_id)
    emit_records(files, FILE_HEADERS, file_row, title="Files")


@files_app.command("info")
def files_info(
    ctx: typer.Context,
    file_id: str = typer.Argument(help="File ID (F...)."),
) -> None:
    """Show one file's metadata."""
    from clack.api.files import get_file

    with open_client(ctx) as client:
        record = get_file(client, file_id)
    format_response(record)
