"""Reaction operations. Writes go straight to the API and never touch the cache."""

from __future__ import annotations

from clack.api.context import ClientContext
from clack.models import ApiResponse


def normalize_emoji(name: str) -> str:
    """Strip surrounding colons, so ``:thumbsup:`` and ``thumbsup`` are equivalent."""
    return name.strip().strip(":")


def add_reaction(ctx: ClientContext, channel: str, timestamp: str, name: str) -> None:
    params = {"channel": channel, "timestamp": timestamp, "name": normalize_emoji(name)}
    ctx.dispatcher.call("reactions.add", params, ApiResponse)


def remove_reaction(ctx: ClientContext, channel: str, timestamp: str, name: str) -> None:
    params = {"channel": channel, "timestamp": timestamp, "name": normalize_emoji(name)}
    ctx.dispatcher.call("reactions.remove", params, ApiResponse)
