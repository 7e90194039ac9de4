"""Search commands.

Message matches are written through to the local cache, so a search warms
the history of every channel it touches.

Typical workflow::

    clack search messages deploy --from @bob --in '#eng' --during week
    clack search stream 'incident' --interval 10
"""

from __future__ import annotations

import threading
from typing import Optional

import typer

from clack.models import File, Message
from clack.output import format_response, info, print_data
from clack.runtime import cell, emit_records, fail_with_exit_code, open_client, wants_structured


search_app = typer.Typer(no_args_is_help=True)

MATCH_HEADERS = ["TS", "Channel", "User", "Text"]
FILE_HEADERS = ["ID", "Name", "Title", "Type", "User"]


def match_row(msg: Message) -> list[str]:
    channel = ""
    if msg.channel is not None:
        channel = f"#{msg.channel.name}" if msg.channel.name else msg.channel.id
    return [msg.ts, channel, cell(msg.user), msg.text.replace("\n", " ")]


def file_row(f: File) -> list[str]:
    return [f.id, cell(f.name), cell(f.title), cell(f.pretty_type or f.filetype), cell(f.user)]


def _query(
    text: str,
    from_user: Optional[str],
    to_user: Optional[str],
    in_channel: Optional[str],
    has: Optional[str],
    after: Optional[str],
    before: Optional[str],
    during: Optional[str],
) -> str:
    from clack.api.search import build_search_query, validate_during

    if during is not None:
        during = validate_during(during)
    return build_search_query(text, from_user, to_user, in_channel, has, after, before, during)


_FROM = typer.Option(None, "--from", help="Messages from this user.")
_TO = typer.Option(None, "--to", help="Direct messages to this user.")
_IN = typer.Option(None, "--in", help="Only in this channel.")
_HAS = typer.Option(None, "--has", help="Only messages with this (link, pin, star, reaction).")
_AFTER = typer.Option(None, "--after", help="Only after this date (YYYY-MM-DD).")
_BEFORE = typer.Option(None, "--before", help="Only before this date (YYYY-MM-DD).")
_DURING = typer.Option(None, "--during", help="today, yesterday, week, month or year.")
_LIMIT = typer.Option(20, "--limit", "-n", help="Results per page.")
_PAGE = typer.Option(1, "--page", help="Result page number.")


@search_app.command("messages")
def search_messages_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="Search text."),
    from_user: Optional[str] = _FROM,
    to_user: Optional[str] = _TO,
    in_channel: Optional[str] = _IN,
    has: Optional[str] = _HAS,
    after: Optional[str] = _AFTER,
    before: Optional[str] = _BEFORE,
    during: Optional[str] = _DURING,
    limit: int = _LIMIT,
    page: int = _PAGE,
) -> None:
    """Search messages."""
    from clack.api.search import search_messages

    with fail_with_exit_code():
        full_query = _query(query, from_user, to_user, in_channel, has, after, before, during)
    with open_client(ctx) as client:
        response = search_messages(client, full_query, count=limit, page=page)

    if wants_structured():
        format_response(response)
        return
    emit_records(response.messages.matches, MATCH_HEADERS, match_row)
    info(f"{len(response.messages.matches)} of {response.messages.total} matches")


@search_app.command("files")
def search_files_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="Search text."),
    from_user: Optional[str] = _FROM,
    to_user: Optional[str] = _TO,
    in_channel: Optional[str] = _IN,
    has: Optional[str] = _HAS,
    after: Optional[str] = _AFTER,
    before: Optional[str] = _BEFORE,
    during: Optional[str] = _DURING,
    limit: int = _LIMIT,
    page: int = _PAGE,
) -> None:
    """Search files."""
    from clack.api.search import search_files

    with fail_with_exit_code():
        full_query = _query(query, from_user, to_user, in_channel, has, after, before, during)
    with open_client(ctx) as client:
        response = search_files(client, full_query, count=limit, page=page)

    if wants_structured():
        format_response(response)
        return
    emit_records(response.files.matches, FILE_HEADERS, file_row)
    info(f"{len(response.files.matches)} of {response.files.total} matches")


@search_app.command("all")
def search_all_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="Search text."),
    from_user: Optional[str] = _FROM,
    to_user: Optional[str] = _TO,
    in_channel: Optional[str] = _IN,
    has: Optional[str] = _HAS,
    after: Optional[str] = _AFTER,
    before: Optional[str] = _BEFORE,
    during: Optional[str] = _DURING,
    limit: int = _LIMIT,
    page: int = _PAGE,
) -> None:
    """Search messages and files together."""
    from clack.api.search import search_all

    with fail_with_exit_code():
        full_query = _query(query, from_user, to_user, in_channel, has, after, before, during)
    with open_client(ctx) as client:
        response = search_all(client, full_query, count=limit, page=page)

    if wants_structured():
        format_response(response)
        return
    emit_records(response.messages.matches, MATCH_HEADERS, match_row, title="Messages")
    emit_records(response.files.matches, FILE_HEADERS, file_row, title="Files")


@search_app.command("channels")
def search_channels_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="Substring of the channel name (case-insensitive)."),
    include_archived: bool = typer.Option(
        False, "--include-archived", help="Include archived conversations."
    ),
) -> None:
    """Find conversations by name."""
    from clack.api.conversations import search_conversations
    from clack.commands.conversations import CONVERSATION_HEADERS, conversation_row

    with open_client(ctx) as client:
        convs = search_conversations(client, query, include_archived=include_archived)
    emit_records(convs, CONVERSATION_HEADERS, conversation_row, title="Conversations")


@search_app.command("stream")
def search_stream_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="Search text."),
    interval: int = typer.Option(5, "--interval", help="Seconds between polls."),
) -> None:
    """Print new matches as they appear, until Ctrl+C."""
    from clack.stream import install_stop_handler, stream_search

    def _print(messages: list[Message]) -> None:
        for msg in messages:
            if wants_structured():
                print_data(msg.model_dump_json(exclude_none=True))
            else:
                print_data("\t".join(match_row(msg)))

    stop = threading.Event()
    with open_client(ctx) as client:
        info(f"Streaming messages matching '{query}' (Ctrl+C to stop)...")
        restore = install_stop_handler(stop)
        try:
            stream_search(client, query, stop, _print, interval=interval)
        finally:
            restore()
    info("Stream stopped.")
