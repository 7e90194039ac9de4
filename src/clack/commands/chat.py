"""Chat commands -- post messages."""

from __future__ import annotations

import sys
from typing import Optional

import typer

from clack.output import format_response, success
from clack.runtime import fail_with_exit_code, open_client, wants_structured


chat_app = typer.Typer(no_args_is_help=True)


@chat_app.command("post")
def chat_post(
    ctx: typer.Context,
    channel: str = typer.Argument(help="Conversation ID, #name or name."),
    text: str = typer.Argument(help="Message text, or '-' to read it from stdin."),
    thread: Optional[str] = typer.Option(None, "--thread", help="Reply in this thread (parent ts)."),
) -> None:
    """Post a message.

    Example::

        clack chat post '#general' 'Deploy finished'
        echo 'from a pipe' | clack chat post '#general' -
    """
    from clack.api.chat import post_message
    from clack.api.resolver import resolve_conversation
    from clack.exceptions import InvalidUsageError

    if text == "-":
        text = sys.stdin.read().rstrip("\n")
    with fail_with_exit_code():
        if not text.strip():
            raise InvalidUsageError("Message text is empty.")

    with open_client(ctx) as client:
        response = post_message(client, resolve_conversation(client, channel), text, thread)

    if wants_structured():
        format_response(response)
    else:
        success(f"Posted message {response.ts or ''} to {channel}".rstrip())
