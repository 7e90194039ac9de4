"""File listing and lookup. Files are not cached."""

from __future__ import annotations

from typing import Optional

from clack.api.context import ClientContext
from clack.models import File, FileInfoResponse, FilesListResponse


def list_files(
    ctx: ClientContext,
    limit: int = 20,
    user: Optional[str] = None,
    channel: Optional[str] = None,
) -> list[File]:
    """List the most recent files, optionally filtered by uploader or channel."""
    params = {"count": limit, "user": user, "channel": channel}
    return ctx.dispatcher.call("files.list", params, FilesListResponse).files


def get_file(ctx: ClientContext, file_id: str) -> File:
    return ctx.dispatcher.call("files.info", {"file": file_id}, FileInfoResponse).file
