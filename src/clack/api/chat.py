"""Posting messages."""

from __future__ import annotations

from typing import Optional

from clack.api.context import ClientContext
from clack.models import ChatPostResponse


def post_message(
    ctx: ClientContext,
    channel: str,
    text: str,
    thread_ts: Optional[str] = None,
) -> ChatPostResponse:
    """Send *text* to *channel*, as a thread reply when *thread_ts* is given.

    The posted message is not written to the cache: the next history read
    picks it up from the API once the cached history has expired.
    """
    params = {"channel": channel, "text": text, "thread_ts": thread_ts}
    return ctx.dispatcher.call("chat.postMessage", params, ChatPostResponse)
