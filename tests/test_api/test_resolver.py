"""Tests for identifier resolution."""

from __future__ import annotations

import pytest

from clack.api.resolver import (
    looks_like_conversation_id,
    looks_like_user_id,
    resolve_conversation,
    resolve_user,
)
from clack.cache.freshness import EntityKind
from clack.exceptions import AmbiguousNameError, NotFoundError
from clack.models import Conversation, User

from conftest import channel, page, user

DAY = 24 * 3600


class TestIdShapes:
    @pytest.mark.parametrize("value", ["C024BE91L", "D0001", "G0001"])
    def test_conversation_ids(self, value: str) -> None:
        assert looks_like_conversation_id(value)

    @pytest.mark.parametrize("value", ["general", "C", "U0001", ""])
    def test_not_conversation_ids(self, value: str) -> None:
        assert not looks_like_conversation_id(value)

    def test_user_ids(self) -> None:
        assert looks_like_user_id("U024BE7LH")
        assert looks_like_user_id("W0001")
        assert not looks_like_user_id("alex")


class TestResolveConversation:
    @pytest.mark.parametrize("identifier", ["C0001", "#C0001"])
    def test_id_is_returned_without_requests(self, fake_api, ctx, identifier) -> None:
        before = len(fake_api.requests)
        assert resolve_conversation(ctx, identifier) == "C0001"
        assert len(fake_api.requests) == before

    def test_name_from_cache_even_when_old(self, fake_api, ctx, store, clock) -> None:
        store.upsert(EntityKind.CONVERSATIONS, "T0001", Conversation(id="C9", name="general"))
        clock.advance(365 * DAY)

        assert resolve_conversation(ctx, "#general") == "C9"
        assert fake_api.calls("conversations.list") == []

    def test_scans_remote_pages_until_found(self, fake_api, ctx, store) -> None:
        fake_api.add(
            "conversations.list",
            page("channels", [channel("C1", "random")], cursor="next"),
            page("channels", [channel("C2", "general")], cursor="more"),
            page("channels", [channel("C3", "never")]),
        )

        assert resolve_conversation(ctx, "general") == "C2"

        calls = fake_api.calls("conversations.list")
        assert len(calls) == 2
        assert calls[0].url.params["types"] == "public_channel,private_channel"
        assert calls[0].url.params["exclude_archived"] == "true"
        assert store.get(EntityKind.CONVERSATIONS, "T0001", "C1") is not None

    def test_second_lookup_is_local(self, fake_api, ctx) -> None:
        fake_api.add("conversations.list", page("channels", [channel("C2", "general")]))

        resolve_conversation(ctx, "general")
        resolve_conversation(ctx, "general")

        assert len(fake_api.calls("conversations.list")) == 1

    def test_not_found_reports_scanned_count(self, fake_api, ctx) -> None:
        fake_api.add(
            "conversations.list",
            page("channels", [channel("C1", "a"), channel("C2", "b")], cursor="x"),
            page("channels", [channel("C3", "c")]),
        )

        with pytest.raises(NotFoundError) as exc_info:
            resolve_conversation(ctx, "#missing")

        message = str(exc_info.value)
        assert "Channel 'missing' not found" in message
        assert "Searched through 3 channels" in message

    def test_validate_falls_back_to_name(self, fake_api, ctx) -> None:
        fake_api.add("conversations.info", {"ok": False, "error": "channel_not_found"})
        fake_api.add("conversations.list", page("channels", [channel("C7", "Cfoo")]))

        assert resolve_conversation(ctx, "Cfoo", validate=True) == "C7"

    def test_validate_accepts_real_id(self, fake_api, ctx) -> None:
        fake_api.add("conversations.info", {"ok": True, "channel": channel("C1", "general")})

        assert resolve_conversation(ctx, "C1", validate=True) == "C1"
        assert fake_api.calls("conversations.list") == []

    def test_refresh_bypasses_cached_names(self, fake_api, ctx, store) -> None:
        from clack.api.context import ClientContext

        store.upsert(EntityKind.CONVERSATIONS, "T0001", Conversation(id="C9", name="general"))
        fake_api.add("conversations.list", page("channels", [channel("C10", "general")]))
        refreshing = ClientContext(ctx.dispatcher, ctx.workspace, store=store, refresh=True)

        assert resolve_conversation(refreshing, "general") == "C10"


class TestResolveUser:
    def test_id_is_returned_without_requests(self, fake_api, ctx) -> None:
        before = len(fake_api.requests)
        assert resolve_user(ctx, "@U0001") == "U0001"
        assert len(fake_api.requests) == before

    def test_handle_from_cache(self, fake_api, ctx, store) -> None:
        store.upsert(EntityKind.USERS, "T0001", User(id="U5", name="alex"))
        assert resolve_user(ctx, "@alex") == "U5"
        assert fake_api.calls("users.list") == []

    def test_ambiguous_handles_list_candidates(self, ctx, store) -> None:
        store.upsert_many(
            EntityKind.USERS,
            "T0001",
            [
                User.model_validate(user("U1", "sam", real_name="Sam One")),
                User.model_validate(user("U2", "sam", profile={"display_name": "Sammy"})),
            ],
        )

        with pytest.raises(AmbiguousNameError) as exc_info:
            resolve_user(ctx, "sam")

        message = str(exc_info.value)
        assert "U1  @sam  (Sam One)" in message
        assert "U2  @sam  (Sammy)" in message
        assert "Please specify the user by exact ID instead." in message

    def test_scans_remote_listing(self, fake_api, ctx) -> None:
        fake_api.add(
            "users.list",
            page("members", [user("U1", "bo")], cursor="n"),
            page("members", [user("U2", "alex")]),
        )
        assert resolve_user(ctx, "alex") == "U2"

    def test_not_found(self, fake_api, ctx) -> None:
        fake_api.add("users.list", page("members", [user("U1", "bo")]))
        with pytest.raises(NotFoundError, match="User 'ghost' not found"):
            resolve_user(ctx, "@ghost")
