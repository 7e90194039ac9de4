"""Tests for the request dispatcher using httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from clack.client.dispatcher import Dispatcher
from clack.exceptions import (
    ApiError,
    ApiErrorCode,
    AuthError,
    ConnectionError_,
    DecodeError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from clack.exit_codes import EXIT_API_ERROR, EXIT_AUTH_FAILURE
from clack.models import ApiResponse, UserInfoResponse

from conftest import BASE_URL, user


# ------------------------------------------------------------------ #
# Requests
# ------------------------------------------------------------------ #


class TestRequest:
    def test_sends_bearer_token_and_decodes(self, fake_api, dispatcher) -> None:
        fake_api.add("users.info", {"ok": True, "user": user("U1", "alex")})

        result = dispatcher.call("users.info", {"user": "U1"}, UserInfoResponse)

        assert result.user.name == "alex"
        request = fake_api.calls("users.info")[0]
        assert request.headers["Authorization"] == "Bearer xoxb-test"
        assert request.url.params["user"] == "U1"
        assert str(request.url).startswith(f"{BASE_URL}/users.info")

    def test_none_params_are_dropped_and_bools_lowercased(self, fake_api, dispatcher) -> None:
        fake_api.add("conversations.list", {"ok": True})

        dispatcher.call(
            "conversations.list",
            {"exclude_archived": True, "cursor": None, "inclusive": False, "limit": 200},
            ApiResponse,
        )

        params = fake_api.calls("conversations.list")[0].url.params
        assert params["exclude_archived"] == "true"
        assert params["inclusive"] == "false"
        assert params["limit"] == "200"
        assert "cursor" not in params

    def test_extra_fields_survive_decoding(self, fake_api, dispatcher) -> None:
        fake_api.add("users.info", {"ok": True, "user": user("U1", "alex", color="ff0000")})
        result = dispatcher.call("users.info", {"user": "U1"}, UserInfoResponse)
        assert result.user.model_dump()["color"] == "ff0000"


# ------------------------------------------------------------------ #
# Rate limiting
# ------------------------------------------------------------------ #


class TestRateLimit:
    def test_retries_after_server_delay(self, fake_api, dispatcher) -> None:
        fake_api.add("users.info", {"ok": False}, status=429, headers={"Retry-After": "2"})
        fake_api.add("users.info", {"ok": False}, status=429, headers={"Retry-After": "2"})
        fake_api.add("users.info", {"ok": False}, status=429, headers={"Retry-After": "2"})
        fake_api.add("users.info", {"ok": True, "user": user("U1", "alex")})

        result = dispatcher.call("users.info", {"user": "U1"}, UserInfoResponse)

        assert result.user.id == "U1"
        assert fake_api.sleeps == [2, 2, 2]
        assert len(fake_api.calls("users.info")) == 4

    def test_missing_retry_after_defaults_to_one_second(self, fake_api, dispatcher) -> None:
        fake_api.add("users.info", {"ok": False}, status=429)
        fake_api.add("users.info", {"ok": True, "user": user("U1", "alex")})

        dispatcher.call("users.info", {"user": "U1"}, UserInfoResponse)

        assert fake_api.sleeps == [1]

    @pytest.mark.parametrize("header", ["-1", "soon", ""])
    def test_unusable_retry_after_waits_one_second(self, fake_api, dispatcher, header) -> None:
        fake_api.add("users.info", {"ok": False}, status=429, headers={"Retry-After": header})
        fake_api.add("users.info", {"ok": True, "user": user("U1", "alex")})

        dispatcher.call("users.info", {"user": "U1"}, UserInfoResponse)

        assert fake_api.sleeps == [1]

    def test_gives_up_after_max_retries(self, fake_api, dispatcher) -> None:
        fake_api.add("users.info", {"ok": False}, status=429, headers={"Retry-After": "1"})

        with pytest.raises(RateLimitError, match=r"Maximum retries \(3\) reached"):
            dispatcher.call("users.info", {"user": "U1"}, UserInfoResponse)

        assert len(fake_api.sleeps) == 3
        assert len(fake_api.calls("users.info")) == 4

    def test_zero_retries_fails_on_first_429(self, fake_api) -> None:
        fake_api.add("users.info", {"ok": False}, status=429)
        with Dispatcher(
            BASE_URL, "t", max_retries=0, transport=fake_api.transport, sleep=fake_api.sleeps.append
        ) as d:
            with pytest.raises(RateLimitError):
                d.call("users.info", None, UserInfoResponse)
        assert fake_api.sleeps == []


# ------------------------------------------------------------------ #
# Failures
# ------------------------------------------------------------------ #


class TestFailures:
    @pytest.mark.parametrize(
        ("status", "exc_type"),
        [
            (401, AuthError),
            (403, AuthError),
            (404, NotFoundError),
            (500, ServerError),
            (502, ServerError),
        ],
    )
    def test_status_mapping_without_retry(self, fake_api, dispatcher, status, exc_type) -> None:
        fake_api.add("users.info", b"", status=status)

        with pytest.raises(exc_type) as exc_info:
            dispatcher.call("users.info", None, UserInfoResponse)

        assert exc_info.value.status_code == status
        assert len(fake_api.calls("users.info")) == 1
        assert fake_api.sleeps == []

    def test_api_error_auth_code(self, fake_api, dispatcher) -> None:
        fake_api.add("users.info", {"ok": False, "error": "invalid_auth"})

        with pytest.raises(ApiError) as exc_info:
            dispatcher.call("users.info", None, UserInfoResponse)

        err = exc_info.value
        assert err.code is ApiErrorCode.INVALID_AUTH
        assert err.exit_code == EXIT_AUTH_FAILURE
        assert "Invalid authentication token" in str(err)

    def test_api_error_unmapped_code_passes_through(self, fake_api, dispatcher) -> None:
        fake_api.add("conversations.info", {"ok": False, "error": "channel_not_found"})

        with pytest.raises(ApiError) as exc_info:
            dispatcher.call("conversations.info", None, ApiResponse)

        err = exc_info.value
        assert err.code is ApiErrorCode.UNMAPPED
        assert err.raw_code == "channel_not_found"
        assert err.exit_code == EXIT_API_ERROR
        assert str(err) == "Slack API error: channel_not_found"

    def test_missing_scope_reports_needed_and_provided(self, fake_api, dispatcher) -> None:
        fake_api.add(
            "conversations.history",
            {"ok": False, "error": "missing_scope", "needed": "channels:history",
             "provided": "channels:read"},
        )

        with pytest.raises(ApiError) as exc_info:
            dispatcher.call("conversations.history", None, ApiResponse)

        message = str(exc_info.value)
        assert "Required: channels:history" in message
        assert "You have: channels:read" in message
        assert "*:history scopes are required" in message

    def test_non_json_body_is_decode_error(self, fake_api, dispatcher) -> None:
        fake_api.add("users.info", b"<html>oops</html>")
        with pytest.raises(DecodeError, match="Failed to parse response from users.info"):
            dispatcher.call("users.info", None, UserInfoResponse)

    def test_shape_mismatch_is_decode_error(self, fake_api, dispatcher) -> None:
        fake_api.add("users.info", {"ok": True, "user": {"name": "no id"}})
        with pytest.raises(DecodeError):
            dispatcher.call("users.info", None, UserInfoResponse)

    def test_network_failure_is_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with Dispatcher(BASE_URL, "t", transport=httpx.MockTransport(handler)) as d:
            with pytest.raises(ConnectionError_):
                d.call("auth.test", None, ApiResponse)

    def test_timeout_is_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with Dispatcher(BASE_URL, "t", transport=httpx.MockTransport(handler)) as d:
            with pytest.raises(ConnectionError_):
                d.call("auth.test", None, ApiResponse)
