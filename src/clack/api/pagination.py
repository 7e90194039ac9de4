"""Cursor pagination with write-through.

:func:`paginate` is a lazy generator: it requests one page, writes its
records through to the cache, yields them, and only then asks for the next
page. Consumers that stop iterating early (the resolver does, as soon as it
finds a match) therefore never trigger requests for pages they do not need,
and every page they did see is already cached.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Optional

from clack.api.context import ClientContext
from clack.cache.freshness import EntityKind
from clack.models import PagedResponse
from clack.output import get_output

def paginate(
    ctx: ClientContext,
    endpoint: str,
    params: Optional[dict[str, Any]],
    response_model: type[PagedResponse],
    items: str,
    kind: Optional[EntityKind] = None,
    page_size: Optional[int] = None,
    conversation_id: Optional[str] = None,
) -> Iterator[list[Any]]:
    """Yield the records of each page of a cursor-paginated listing.

    Args:
        ctx: The access context.
        endpoint: API method, for example ``users.list``.
        params: Extra query parameters sent with every page.
        response_model: Model whose *items* attribute holds the page's records.
        items: Name of the list attribute on *response_model*.
        kind: Cache table to write each page through to; ``None`` for
            listings that are not cached (such as member IDs).
        page_size: Value of the ``limit`` parameter; defaults to
            ``ctx.page_size``.
        conversation_id: Conversation the records belong to (messages only).

    Raises:
        Any dispatcher error. Pages already yielded stay cached.
    """
    base_params = dict(params or {})
    base_params["limit"] = page_size or ctx.page_size
    cursor: Optional[str] = None
    page_number = 0

    while True:
        request_params = dict(base_params)
        if cursor:
            request_params["cursor"] = cursor

        response = ctx.dispatcher.call(endpoint, request_params, response_model)
        records = list(getattr(response, items))
        page_number += 1
        get_output().debug(f"{endpoint}: page {page_number}, {len(records)} records")

        if kind is not None and records:
            ctx.write(kind, records, conversation_id=conversation_id)

        yield records

        cursor = response.next_cursor
        if not cursor:
            return


def collect(pages: Iterable[list[Any]]) -> list[Any]:
    """Concatenate every page, in order. Any error aborts the whole collection."""
    accumulated: list[Any] = []
    for page in pages:
        accumulated.extend(page)
    return accumulated
