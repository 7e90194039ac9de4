"""Conversation commands -- channels, history, threads and members.

``CHANNEL`` arguments accept an ID (``C024BE91L``), ``#name`` or a bare
name. Names are resolved through the local cache before the API is asked.

Typical workflow::

    clack conversations list
    clack conversations history '#general' --limit 20
    clack conversations replies '#general' 1700000000.000100
"""

from __future__ import annotations

from typing import Optional

import typer

from clack.models import Conversation, Message
from clack.output import format_response, print_data
from clack.runtime import cell, emit_records, open_client, wants_structured


conversations_app = typer.Typer(no_args_is_help=True)

CONVERSATION_HEADERS = ["ID", "Name", "Private", "Archived", "Members", "Topic"]
MESSAGE_HEADERS = ["TS", "User", "Replies", "Text"]


def conversation_row(conv: Conversation) -> list[str]:
    return [
        conv.id,
        conv.name,
        cell(conv.is_private),
        cell(conv.is_archived),
        cell(conv.num_members),
        conv.topic.value if conv.topic else "",
    ]


def message_row(msg: Message) -> list[str]:
    return [msg.ts, cell(msg.user), cell(msg.reply_count), msg.text.replace("\n", " ")]


@conversations_app.command("list")
def conversations_list(
    ctx: typer.Context,
    include_archived: bool = typer.Option(
        False, "--include-archived", help="Include archived conversations."
    ),
    types: str = typer.Option(
        "public_channel,private_channel", "--types", help="Comma-separated conversation types."
    ),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", help="Maximum conversations to show."
    ),
) -> None:
    """List conversations visible to the token."""
    from clack.api.conversations import list_conversations

    with open_client(ctx) as client:
        convs = list_conversations(
            client, include_archived=include_archived, types=types, limit=limit
        )
    emit_records(convs, CONVERSATION_HEADERS, conversation_row, title="Conversations")


@conversations_app.command("info")
def conversations_info(
    ctx: typer.Context,
    channel: str = typer.Argument(help="Conversation ID, #name or name."),
) -> None:
    """Show one conversation."""
    from clack.api.conversations import get_conversation
    from clack.api.resolver import resolve_conversation

    with open_client(ctx) as client:
        conv = get_conversation(client, resolve_conversation(client, channel))
    format_response(conv)


@conversations_app.command("history")
def conversations_history(
    ctx: typer.Context,
    channel: str = typer.Argument(help="Conversation ID, #name or name."),
    limit: int = typer.Option(100, "--limit", "-n", help="Maximum messages to show."),
    latest: Optional[str] = typer.Option(None, "--latest", help="Only messages before this ts."),
    oldest: Optional[str] = typer.Option(None, "--oldest", help="Only messages after this ts."),
) -> None:
    """Show recent messages, newest first."""
    from clack.api.messages import list_messages
    from clack.api.resolver import resolve_conversation

    with open_client(ctx) as client:
        channel_id = resolve_conversation(client, channel)
        messages = list_messages(client, channel_id, limit=limit, latest=latest, oldest=oldest)
    emit_records(messages, MESSAGE_HEADERS, message_row)


@conversations_app.command("replies")
def conversations_replies(
    ctx: typer.Context,
    channel: str = typer.Argument(help="Conversation ID, #name or name."),
    thread_ts: str = typer.Argument(help="Timestamp of the thread's parent message."),
) -> None:
    """Show a thread, oldest first."""
    from clack.api.messages import get_thread
    from clack.api.resolver import resolve_conversation

    with open_client(ctx) as client:
        channel_id = resolve_conversation(client, channel)
        messages = get_thread(client, channel_id, thread_ts)

    if not messages and not wants_structured():
        print_data("Thread not found or empty")
        return
    emit_records(messages, MESSAGE_HEADERS, message_row)


@conversations_app.command("members")
def conversations_members(
    ctx: typer.Context,
    channel: str = typer.Argument(help="Conversation ID, #name or name."),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum members to show."),
) -> None:
    """List the user IDs in a conversation."""
    from clack.api.conversations import list_members
    from clack.api.resolver import resolve_conversation

    with open_client(ctx) as client:
        members = list_members(client, resolve_conversation(client, channel), limit=limit)
    format_response(members)
