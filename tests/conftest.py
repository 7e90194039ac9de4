"""Shared test fixtures for clack.

Provides a fake Slack Web API served through :class:`httpx.MockTransport`,
temporary SQLite stores, isolated XDG directories, and a ready access
context. These fixtures are discovered by pytest automatically.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Optional

import httpx
import pytest

from clack.api.context import ClientContext
from clack.api.session import WorkspaceSession
from clack.cache.freshness import FreshnessPolicy
from clack.cache.store import LocalStore
from clack.client.dispatcher import Dispatcher
from clack.output import OutputManager, reset_output, set_output

BASE_URL = "https://slack.test/api"

AUTH_TEST = {
    "ok": True,
    "url": "https://test.slack.com/",
    "team": "Test Team",
    "user": "tester",
    "team_id": "T0001",
    "user_id": "U0000001",
}


# ---------------------------------------------------------------------------
# Fake API
# ---------------------------------------------------------------------------


class FakeSlack:
    """Scripted Slack Web API.

    Each endpoint has a queue of responses; the last one repeats once the
    queue is down to a single entry. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[str, list[tuple[int, Any, dict[str, str]]]] = {}
        self.requests: list[httpx.Request] = []
        self.sleeps: list[float] = []
        self.add("auth.test", AUTH_TEST)

    def add(
        self,
        endpoint: str,
        *bodies: Any,
        status: int = 200,
        headers: Optional[dict[str, str]] = None,
    ) -> FakeSlack:
        queue = self.routes.setdefault(endpoint, [])
        for body in bodies:
            queue.append((status, body, headers or {}))
        return self

    def replace(self, endpoint: str, *bodies: Any, **kwargs: Any) -> FakeSlack:
        self.routes.pop(endpoint, None)
        return self.add(endpoint, *bodies, **kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        endpoint = request.url.path.rsplit("/", 1)[-1]
        self.requests.append(request)
        queue = self.routes.get(endpoint)
        if not queue:
            return httpx.Response(200, json={"ok": False, "error": "unknown_method"})
        status, body, headers = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body, headers=headers)
        return httpx.Response(status, content=body or b"", headers=headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, endpoint: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/" + endpoint)]


class FakeClock:
    """Settable epoch clock for freshness tests."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def page(items_key: str, items: list[Any], cursor: str = "") -> dict[str, Any]:
    """Build one cursor-paginated response body."""
    return {"ok": True, items_key: items, "response_metadata": {"next_cursor": cursor}}


def user(user_id: str, name: str, **extra: Any) -> dict[str, Any]:
    return {"id": user_id, "name": name, "profile": extra.pop("profile", {}), **extra}


def channel(channel_id: str, name: str, **extra: Any) -> dict[str, Any]:
    return {"id": channel_id, "name": name, "is_channel": True, **extra}


def message(ts: str, text: str = "hi", user_id: str = "U0000001", **extra: Any) -> dict[str, Any]:
    return {"type": "message", "ts": ts, "user": user_id, "text": text, **extra}


# ---------------------------------------------------------------------------
# Output state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> Iterator[None]:
    """Install a quiet, colourless OutputManager and reset it afterwards.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams, so a fresh manager is
    needed for every test.
    """
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Access layer fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_api() -> FakeSlack:
    return FakeSlack()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(tmp_path: Path, clock: FakeClock) -> LocalStore:
    """A migrated store in a temporary directory with a controllable clock."""
    return LocalStore.open(tmp_path / "cache.db", policy=FreshnessPolicy(), clock=clock)


@pytest.fixture
def dispatcher(fake_api: FakeSlack) -> Iterator[Dispatcher]:
    with Dispatcher(
        BASE_URL, "xoxb-test", transport=fake_api.transport, sleep=fake_api.sleeps.append
    ) as d:
        yield d


@pytest.fixture
def ctx(dispatcher: Dispatcher, store: LocalStore) -> ClientContext:
    """An initialised access context backed by the fake API and a temp store."""
    return WorkspaceSession(dispatcher).context(store=store)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the XDG directories at tmp_path and provide a test token.

    Clears the CLACK_* variables so a developer's environment never leaks
    into a test.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("SLACK_TOKEN", "xoxb-test")
    for var in ["CLACK_BASE_URL", "CLACK_TOKEN_SOURCE", "NO_COLOR"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("clack.config._is_xdg_platform", lambda: True)
    monkeypatch.chdir(tmp_path)
    return tmp_path
