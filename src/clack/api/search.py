"""Search operations and query building.

Search endpoints are page-numbered rather than cursor-paginated, so they do
not go through :func:`~clack.api.pagination.paginate`. Message matches carry
their channel, which lets them be written through to the message cache.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Optional

from clack.api.context import ClientContext
from clack.cache.freshness import EntityKind
from clack.exceptions import InvalidUsageError
from clack.models import (
    Message,
    SearchAllResponse,
    SearchFilesResponse,
    SearchMessagesResponse,
)
from clack.output import get_output

VALID_DURING_VALUES = ("today", "yesterday", "week", "month", "year")


def validate_during(value: str) -> str:
    """Check a ``--during`` value and return it lower-cased.

    Raises:
        InvalidUsageError: If the value is not one the search API understands.
    """
    lowered = value.lower()
    if lowered not in VALID_DURING_VALUES:
        raise InvalidUsageError(
            f"Invalid --during value: '{value}'\n\n"
            f"Valid values are: {', '.join(VALID_DURING_VALUES)}"
        )
    return lowered


def build_search_query(
    text: str,
    from_user: Optional[str] = None,
    to_user: Optional[str] = None,
    in_channel: Optional[str] = None,
    has: Optional[str] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    during: Optional[str] = None,
) -> str:
    """Append search modifiers to *text* in the order the API documents them.

    >>> build_search_query("deploy", from_user="bob", in_channel="eng")
    'deploy from:bob in:eng'
    """
    modifiers = [
        ("from", from_user),
        ("to", to_user),
        ("in", in_channel),
        ("has", has),
        ("after", after),
        ("before", before),
        ("during", during),
    ]
    parts = [text]
    parts.extend(f"{name}:{value}" for name, value in modifiers if value)
    return " ".join(parts)


def _params(query: str, count: Optional[int], page: Optional[int]) -> dict[str, object]:
    return {"query": query, "count": count, "page": page}


def search_messages(
    ctx: ClientContext,
    query: str,
    count: Optional[int] = None,
    page: Optional[int] = None,
) -> SearchMessagesResponse:
    """Run ``search.messages`` and cache the matched messages."""
    response = ctx.dispatcher.call(
        "search.messages", _params(query, count, page), SearchMessagesResponse
    )
    cache_search_messages(ctx, response.messages.matches)
    return response


def search_files(
    ctx: ClientContext,
    query: str,
    count: Optional[int] = None,
    page: Optional[int] = None,
) -> SearchFilesResponse:
    return ctx.dispatcher.call("search.files", _params(query, count, page), SearchFilesResponse)


def search_all(
    ctx: ClientContext,
    query: str,
    count: Optional[int] = None,
    page: Optional[int] = None,
) -> SearchAllResponse:
    """Run ``search.all`` (messages and files); message matches are cached."""
    response = ctx.dispatcher.call("search.all", _params(query, count, page), SearchAllResponse)
    cache_search_messages(ctx, response.messages.matches)
    return response


def cache_search_messages(ctx: ClientContext, matches: list[Message]) -> int:
    """Write search matches through to the cache, grouped by channel.

    Matches without a channel reference are skipped. Returns how many
    messages were handed to the store.
    """
    by_channel: dict[str, list[Message]] = defaultdict(list)
    for message in matches:
        if message.channel is not None:
            by_channel[message.channel.id].append(message)

    cached = 0
    for channel_id, messages in by_channel.items():
        ctx.write(EntityKind.MESSAGES, messages, conversation_id=channel_id)
        cached += len(messages)

    if by_channel:
        get_output().debug(
            f"[cache] Search results - cached {cached} messages from {len(by_channel)} channels"
        )
    return cached
