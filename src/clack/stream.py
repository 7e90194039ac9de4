"""Polling search stream.

``clack search stream QUERY`` repeatedly asks ``search.messages`` for the
newest matches and prints only the ones it has not shown before, until the
user presses Ctrl+C. The loop is driven by a :class:`threading.Event`: the
SIGINT handler sets it, and the loop checks it between polls, so a request
already in flight is allowed to finish.
"""

from __future__ import annotations

import signal
import threading
import time
from typing import Any, Callable, Optional

from clack.api.context import ClientContext
from clack.api.search import search_messages
from clack.exceptions import ClackError
from clack.models import Message
from clack.output import get_output

DEFAULT_INTERVAL = 5
POLL_COUNT = 20


class StreamState:
    """Tracks which messages have been shown and paces the polls.

    Args:
        interval: Seconds between the start of consecutive polls.
        clock: Monotonic clock; injectable for tests.
    """

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.interval = interval
        self._clock = clock
        self._seen: set[tuple[str, str]] = set()
        self._last_poll = clock()

    def is_new(self, channel_id: str, ts: str) -> bool:
        """Return True the first time a ``(channel_id, ts)`` pair is seen."""
        key = (channel_id, ts)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def remaining(self) -> float:
        """Seconds left before the next poll is due."""
        return max(0.0, self.interval - (self._clock() - self._last_poll))

    def wait_for_next_poll(self, stop: threading.Event) -> None:
        """Sleep until the next poll is due, waking early if *stop* is set."""
        stop.wait(self.remaining())
        self._last_poll = self._clock()


def stream_search(
    ctx: ClientContext,
    query: str,
    stop: threading.Event,
    on_new: Callable[[list[Message]], Any],
    interval: float = DEFAULT_INTERVAL,
    state: Optional[StreamState] = None,
) -> int:
    """Poll for new matches of *query* until *stop* is set.

    Every fetched match is cached (by :func:`~clack.api.search.search_messages`);
    only unseen ones are passed to *on_new*. A failed poll is logged in
    verbose mode and the loop carries on.

    Returns:
        The number of polls performed.
    """
    state = state or StreamState(interval)
    output = get_output()
    polls = 0

    while not stop.is_set():
        polls += 1
        try:
            response = search_messages(ctx, query, count=POLL_COUNT, page=1)
        except ClackError as exc:
            output.debug(f"[stream] Error fetching results: {exc}")
        else:
            fresh = [
                msg
                for msg in response.messages.matches
                if state.is_new(msg.channel.id if msg.channel else "unknown", msg.ts)
            ]
            output.debug(f"[stream] Poll {polls}: {len(fresh)} new of {len(response.messages.matches)}")
            if fresh:
                on_new(fresh)

        if stop.is_set():
            break
        state.wait_for_next_poll(stop)

    return polls


def install_stop_handler(stop: threading.Event) -> Callable[[], None]:
    """Make SIGINT set *stop* instead of raising ``KeyboardInterrupt``.

    Returns:
        A function that restores the previous handler.
    """

    def _handler(signum: int, frame: Any) -> None:
        get_output().info("\nStopping stream...")
        stop.set()

    previous = signal.signal(signal.SIGINT, _handler)

    def restore() -> None:
        signal.signal(signal.SIGINT, previous)

    return restore
