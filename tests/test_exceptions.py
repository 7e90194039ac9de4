"""Tests for the exception hierarchy and exit codes."""

from __future__ import annotations

import pytest

from clack import exit_codes
from clack.exceptions import (
    AmbiguousNameError,
    ApiError,
    ApiErrorCode,
    AuthError,
    CacheError,
    ClackError,
    ConfigError,
    ConnectionError_,
    DecodeError,
    InvalidUsageError,
    NotFoundError,
    RateLimitError,
    ServerError,
    WorkspaceNotInitializedError,
)


class TestExitCodes:
    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (ClackError("x"), exit_codes.EXIT_GENERIC_FAILURE),
            (InvalidUsageError("x"), exit_codes.EXIT_INVALID_USAGE),
            (AmbiguousNameError("x"), exit_codes.EXIT_INVALID_USAGE),
            (AuthError("x", status_code=401), exit_codes.EXIT_AUTH_FAILURE),
            (NotFoundError("x"), exit_codes.EXIT_NOT_FOUND),
            (ServerError("x", status_code=500), exit_codes.EXIT_SERVER_ERROR),
            (ConnectionError_("x"), exit_codes.EXIT_CONNECTION_ERROR),
            (RateLimitError("x"), exit_codes.EXIT_RATE_LIMITED),
            (DecodeError("x"), exit_codes.EXIT_DECODE_ERROR),
            (ConfigError("x"), exit_codes.EXIT_GENERIC_FAILURE),
            (WorkspaceNotInitializedError(), exit_codes.EXIT_GENERIC_FAILURE),
        ],
    )
    def test_class_exit_codes(self, exc: ClackError, code: int) -> None:
        assert exc.exit_code == code

    def test_explicit_override(self) -> None:
        assert ClackError("x", exit_code=42).exit_code == 42

    def test_cache_error_is_a_clack_error(self) -> None:
        assert isinstance(CacheError("x"), ClackError)


class TestApiErrorCode:
    def test_known_code(self) -> None:
        assert ApiErrorCode.from_code("token_revoked") is ApiErrorCode.TOKEN_REVOKED

    def test_unknown_code_is_unmapped(self) -> None:
        assert ApiErrorCode.from_code("not_in_channel") is ApiErrorCode.UNMAPPED


class TestApiError:
    @pytest.mark.parametrize(
        "code",
        ["invalid_auth", "not_authed", "account_inactive", "token_revoked",
         "no_permission", "org_login_required", "ekm_access_denied", "missing_scope"],
    )
    def test_auth_codes_exit_as_auth_failure(self, code: str) -> None:
        assert ApiError(code).exit_code == exit_codes.EXIT_AUTH_FAILURE

    def test_other_codes_exit_as_api_error(self) -> None:
        assert ApiError("ratelimited").exit_code == exit_codes.EXIT_API_ERROR
        assert ApiError("channel_not_found").exit_code == exit_codes.EXIT_API_ERROR

    def test_missing_scope_without_history_has_no_note(self) -> None:
        message = str(ApiError("missing_scope", needed="users:read"))
        assert "Required: users:read" in message
        assert "You have: none" in message
        assert "history scopes" not in message
