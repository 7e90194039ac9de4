"""Reaction commands."""

from __future__ import annotations

import typer

from clack.output import success
from clack.runtime import open_client


reactions_app = typer.Typer(no_args_is_help=True)


@reactions_app.command("add")
def reactions_add(
    ctx: typer.Context,
    channel: str = typer.Argument(help="Conversation ID, #name or name."),
    timestamp: str = typer.Argument(help="Timestamp of the message."),
    emoji: str = typer.Argument(help="Emoji name, with or without colons."),
) -> None:
    """Add a reaction to a message.

    Example::

        clack reactions add '#general' 1700000000.000100 :thumbsup:
    """
    from clack.api.reactions import add_reaction, normalize_emoji
    from clack.api.resolver import resolve_conversation

    with open_client(ctx) as client:
        add_reaction(client, resolve_conversation(client, channel), timestamp, emoji)
    success(f"Added :{normalize_emoji(emoji)}: to {timestamp}")


@reactions_app.command("remove")
def reactions_remove(
    ctx: typer.Context,
    channel: str = typer.Argument(help="Conversation ID, #name or name."),
    timestamp: str = typer.Argument(help="Timestamp of the message."),
    emoji: str = typer.Argument(help="Emoji name, with or without colons."),
) -> None:
    """Remove your reaction from a message."""
    from clack.api.reactions import normalize_emoji, remove_reaction
    from clack.api.resolver import resolve_conversation

    with open_client(ctx) as client:
        remove_reaction(client, resolve_conversation(client, channel), timestamp, emoji)
    success(f"Removed :{normalize_emoji(emoji)}: from {timestamp}")
