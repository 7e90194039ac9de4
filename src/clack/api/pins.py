"""Pin operations. Writes go straight to the API and never touch the cache."""

from __future__ import annotations

from clack.api.context import ClientContext
from clack.models import ApiResponse, PinItem, PinsListResponse


def list_pins(ctx: ClientContext, channel: str) -> list[PinItem]:
    return ctx.dispatcher.call("pins.list", {"channel": channel}, PinsListResponse).items


def add_pin(ctx: ClientContext, channel: str, timestamp: str) -> None:
    ctx.dispatcher.call("pins.add", {"channel": channel, "timestamp": timestamp}, ApiResponse)


def remove_pin(ctx: ClientContext, channel: str, timestamp: str) -> None:
    ctx.dispatcher.call("pins.remove", {"channel": channel, "timestamp": timestamp}, ApiResponse)
