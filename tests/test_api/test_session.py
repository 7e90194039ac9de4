"""Tests for WorkspaceSession and the access context's cache helpers."""

from __future__ import annotations

import pytest

from clack.api.context import ClientContext
from clack.api.session import WorkspaceSession
from clack.cache.freshness import EntityKind
from clack.exceptions import ApiError, CacheError, WorkspaceNotInitializedError
from clack.models import User

from conftest import AUTH_TEST


class TestWorkspaceSession:
    def test_uninitialised_session_refuses_workspace_id(self, dispatcher) -> None:
        session = WorkspaceSession(dispatcher)
        assert not session.is_initialized
        with pytest.raises(WorkspaceNotInitializedError):
            session.workspace_id

    def test_init_calls_auth_test_once(self, fake_api, dispatcher) -> None:
        session = WorkspaceSession(dispatcher)

        first = session.init()
        second = session.init()

        assert first is second
        assert session.workspace_id == "T0001"
        assert first.team == "Test Team"
        assert first.user_id == AUTH_TEST["user_id"]
        assert len(fake_api.calls("auth.test")) == 1

    def test_failed_init_leaves_session_uninitialised(self, fake_api, dispatcher) -> None:
        fake_api.replace("auth.test", {"ok": False, "error": "invalid_auth"})
        session = WorkspaceSession(dispatcher)

        with pytest.raises(ApiError):
            session.init()

        assert not session.is_initialized

    def test_context_carries_workspace_and_flags(self, dispatcher, store) -> None:
        ctx = WorkspaceSession(dispatcher).context(store=store, refresh=True)
        assert ctx.workspace_id == "T0001"
        assert ctx.store is store
        assert ctx.refresh is True


class _BrokenStore:
    def get(self, *args, **kwargs):
        raise CacheError("disk on fire")

    get_all = get
    upsert_many = get


class TestContextCacheHelpers:
    def test_refresh_skips_reads_but_still_writes(self, ctx: ClientContext, store) -> None:
        refreshing = ClientContext(ctx.dispatcher, ctx.workspace, store=store, refresh=True)
        alex = User(id="U1", name="alex")

        refreshing.write(EntityKind.USERS, [alex])

        assert refreshing.read(EntityKind.USERS, "U1") is None
        assert ctx.read(EntityKind.USERS, "U1") == alex

    def test_no_store_is_always_a_miss(self, ctx: ClientContext) -> None:
        bare = ClientContext(ctx.dispatcher, ctx.workspace)
        bare.write(EntityKind.USERS, [User(id="U1", name="alex")])
        assert bare.read(EntityKind.USERS, "U1") is None
        assert bare.read_all(EntityKind.USERS) is None

    def test_store_errors_become_misses(self, ctx: ClientContext) -> None:
        broken = ClientContext(ctx.dispatcher, ctx.workspace, store=_BrokenStore())
        assert broken.read(EntityKind.USERS, "U1") is None
        assert broken.read_all(EntityKind.USERS) is None
        broken.write(EntityKind.USERS, [User(id="U1", name="alex")])
