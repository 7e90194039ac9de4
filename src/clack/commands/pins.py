"""Pin commands."""

from __future__ import annotations

import typer

from clack.models import PinItem
from clack.output import success
from clack.runtime import cell, emit_records, open_client


pins_app = typer.Typer(no_args_is_help=True)

PIN_HEADERS = ["Type", "TS", "Pinned by", "Text"]


def pin_row(pin: PinItem) -> list[str]:
    msg = pin.message
    return [
        pin.pin_type,
        msg.ts if msg else "",
        cell(pin.created_by),
        msg.text.replace("\n", " ") if msg else "",
    ]


@pins_app.command("list")
def pins_list(
    ctx: typer.Context,
    channel: str = typer.Argument(help="Conversation ID, #name or name."),
) -> None:
    """List items pinned to a conversation."""
    from clack.api.pins import list_pins
    from clack.api.resolver import resolve_conversation

    with open_client(ctx) as client:
        pins = list_pins(client, resolve_conversation(client, channel))
    emit_records(pins, PIN_HEADERS, pin_row, title="Pins")


@pins_app.command("add")
def pins_add(
    ctx: typer.Context,
    channel: str = typer.Argument(help="Conversation ID, #name or name."),
    timestamp: str = typer.Argument(help="Timestamp of the message to pin."),
) -> None:
    """Pin a message."""
    from clack.api.pins import add_pin
    from clack.api.resolver import resolve_conversation

    with open_client(ctx) as client:
        add_pin(client, resolve_conversation(client, channel), timestamp)
    success(f"Pinned {timestamp} in {channel}")


@pins_app.command("remove")
def pins_remove(
    ctx: typer.Context,
    channel: str = typer.Argument(help="Conversation ID, #name or name."),
    timestamp: str = typer.Argument(help="Timestamp of the pinned message."),
) -> None:
    """Unpin a message."""
    from clack.api.pins import remove_pin
    from clack.api.resolver import resolve_conversation

    with open_client(ctx) as client:
        remove_pin(client, resolve_conversation(client, channel), timestamp)
    success(f"Unpinned {timestamp} in {channel}")
