"""Message history and thread operations."""

from __future__ import annotations

from typing import Optional

from clack.api.context import ClientContext
from clack.api.pagination import collect, paginate
from clack.cache.freshness import EntityKind
from clack.models import Message, MessagesResponse


def _ts_key(message: Message) -> float:
    try:
        return float(message.ts)
    except ValueError:
        return 0.0


def _is_complete_thread(cached: list[Message], thread_ts: str) -> bool:
    parent = next((m for m in cached if m.ts == thread_ts), None)
    if parent is None:
        return False
    # history caches a parent without its replies
    expected = parent.reply_count + 1 if parent.reply_count is not None else 2
    return len(cached) >= expected


def list_messages(
    ctx: ClientContext,
    conversation_id: str,
    limit: int = 100,
    latest: Optional[str] = None,
    oldest: Optional[str] = None,
) -> list[Message]:
    """Return recent messages of a conversation, newest first.

    Without a time window the cached history is served while it is fresh.
    A window (``latest`` / ``oldest``) always goes to the API, since the
    cache cannot tell whether it holds every message inside it.

    Args:
        ctx: The access context.
        conversation_id: Conversation ID (resolve names first).
        limit: Maximum number of messages returned.
        latest: Only messages before this timestamp.
        oldest: Only messages after this timestamp.
    """
    if latest is None and oldest is None:
        cached = ctx.read_all(EntityKind.MESSAGES, conversation_id=conversation_id)
        if cached is not None:
            messages = sorted(cached, key=_ts_key, reverse=True)  # type: ignore[arg-type]
            return messages[:limit]

    params = {
        "channel": conversation_id,
        "limit": limit,
        "latest": latest,
        "oldest": oldest,
    }
    messages = ctx.dispatcher.call("conversations.history", params, MessagesResponse).messages
    ctx.write(EntityKind.MESSAGES, messages, conversation_id=conversation_id)
    return sorted(messages, key=_ts_key, reverse=True)[:limit]


def get_thread(
    ctx: ClientContext,
    conversation_id: str,
    thread_ts: str,
    page_size: Optional[int] = None,
) -> list[Message]:
    """Return a thread's parent and replies, oldest first.

    A cached, fresh thread slice is served directly when it holds the parent
    and as many replies as the parent announces; otherwise every page of
    ``conversations.replies`` is fetched and cached.
    """
    cached = ctx.read_all(
        EntityKind.MESSAGES, conversation_id=conversation_id, thread_ts=thread_ts
    )
    if cached and _is_complete_thread(cached, thread_ts):  # type: ignore[arg-type]
        return sorted(cached, key=_ts_key)  # type: ignore[arg-type]

    replies = collect(
        paginate(
            ctx, "conversations.replies", {"channel": conversation_id, "ts": thread_ts},
            MessagesResponse, "messages",
            kind=EntityKind.MESSAGES, page_size=page_size, conversation_id=conversation_id,
        )
    )
    return sorted(replies, key=_ts_key)
