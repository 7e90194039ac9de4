"""Conversation operations: listing, lookup, name search and membership."""

from __future__ import annotations

from typing import Optional

from clack.api.context import ClientContext
from clack.api.pagination import paginate
from clack.cache.freshness import EntityKind
from clack.models import (
    Conversation,
    ConversationInfoResponse,
    ConversationMembersResponse,
    ConversationsListResponse,
)

DEFAULT_TYPES = "public_channel,private_channel"


def list_conversations(
    ctx: ClientContext,
    include_archived: bool = False,
    types: str = DEFAULT_TYPES,
    page_size: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[Conversation]:
    """Fetch every conversation of the given *types*, caching page by page.

    Args:
        ctx: The access context.
        include_archived: Also return archived conversations.
        types: Comma-separated conversation types, as the API expects.
        page_size: Conversations requested per page (``ctx.page_size`` when omitted).
        limit: Stop requesting pages once this many conversations have been seen.
    """
    params = {"types": types, "exclude_archived": not include_archived}
    convs: list[Conversation] = []
    for page in paginate(
        ctx, "conversations.list", params, ConversationsListResponse, "channels",
        kind=EntityKind.CONVERSATIONS, page_size=page_size,
    ):
        convs.extend(page)
        if limit is not None and len(convs) >= limit:
            return convs[:limit]
    return convs


def get_conversation(ctx: ClientContext, conversation_id: str) -> Conversation:
    """Return one conversation, from the cache when fresh, else via ``conversations.info``."""
    cached = ctx.read(EntityKind.CONVERSATIONS, conversation_id)
    if cached is not None:
        assert isinstance(cached, Conversation)
        return cached

    conv = ctx.dispatcher.call(
        "conversations.info", {"channel": conversation_id}, ConversationInfoResponse
    ).channel
    ctx.write(EntityKind.CONVERSATIONS, [conv])
    return conv


def search_conversations(
    ctx: ClientContext,
    query: str,
    include_archived: bool = False,
) -> list[Conversation]:
    """Return conversations whose name contains *query*, ignoring case."""
    needle = query.lower()
    return [
        conv
        for conv in list_conversations(ctx, include_archived=include_archived)
        if needle in conv.name.lower()
    ]


def list_members(
    ctx: ClientContext,
    conversation_id: str,
    page_size: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[str]:
    """Return the user IDs of a conversation's members."""
    members: list[str] = []
    for page in paginate(
        ctx, "conversations.members", {"channel": conversation_id},
        ConversationMembersResponse, "members", page_size=page_size,
    ):
        members.extend(page)
        if limit is not None and len(members) >= limit:
            return members[:limit]
    return members
