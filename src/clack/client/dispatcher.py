"""Request dispatcher for the Slack Web API.

:class:`Dispatcher` is the single point through which every remote call
passes. It wraps :class:`httpx.Client` and layers on:

- **Bearer auth** -- the token is attached to every request.
- **Rate-limit backoff** -- HTTP 429 is retried after the server's
  ``Retry-After`` delay, up to ``max_retries`` times.
- **Status mapping** -- any other non-2xx status fails immediately with a
  typed :class:`~clack.exceptions.HttpStatusError`.
- **Envelope checking** -- ``"ok": false`` bodies become an
  :class:`~clack.exceptions.ApiError` carrying a closed
  :class:`~clack.exceptions.ApiErrorCode`.
- **Typed decoding** -- successful bodies are validated into the caller's
  Pydantic response model.

Example::

    with Dispatcher("https://slack.com/api", token) as dispatcher:
        info = dispatcher.call("users.info", {"user": "U123"}, UserInfoResponse)
"""

from __future__ import annotations

import json
import time
from typing import Any, Callable, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from clack.exceptions import (
    ApiError,
    AuthError,
    ConnectionError_,
    DecodeError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from clack.models import Envelope
from clack.output import get_output

T = TypeVar("T", bound=BaseModel)

DEFAULT_BASE_URL = "https://slack.com/api"


class Dispatcher:
    """Synchronous dispatcher for API calls.

    Must be used as a context manager so that the underlying transport is
    opened and closed properly.

    Args:
        base_url: API root; endpoint names are appended after a ``/``.
        token: Bearer token sent in the ``Authorization`` header.
        timeout: Per-request timeout in seconds.
        max_retries: How many times HTTP 429 is retried before giving up.
        transport: Optional httpx transport (``httpx.MockTransport`` in tests).
        sleep: Function used to wait out ``Retry-After``; injectable for tests.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30,
        max_retries: int = 3,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._max_retries = max_retries
        self._transport = transport
        self._sleep = sleep
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Dispatcher:
        self._client = httpx.Client(
            timeout=self._timeout,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Accept": "application/json",
            },
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    @property
    def max_retries(self) -> int:
        return self._max_retries

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def call(
        self,
        endpoint: str,
        params: Optional[dict[str, Any]],
        response_model: type[T],
    ) -> T:
        """Issue a GET to *endpoint* and decode the body into *response_model*.

        Args:
            endpoint: API method name such as ``conversations.history``.
            params: Query parameters. ``None`` values are dropped.
            response_model: Pydantic model for the successful body.

        Returns:
            The validated response model.

        Raises:
            RateLimitError: When HTTP 429 persists past ``max_retries``.
            AuthError: On HTTP 401 / 403.
            NotFoundError: On HTTP 404.
            ServerError: On any other non-2xx status.
            ConnectionError_: On network or timeout failures.
            ApiError: When the envelope says ``"ok": false``.
            DecodeError: When the body is not JSON or does not fit the model.
        """
        response = self._send_with_backoff(endpoint, _clean_params(params))
        return self._decode(endpoint, response, response_model)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _send_with_backoff(self, endpoint: str, params: dict[str, str]) -> httpx.Response:
        assert self._client is not None, "Dispatcher not initialised -- use as context manager"

        output = get_output()
        url = f"{self._base_url}/{endpoint}"
        retries = 0

        while True:
            output.debug(f"-> GET {url}")
            if params:
                query = "&".join(f"{k}={v}" for k, v in params.items())
                output.debug(f"   Query: {query}")

            start = time.monotonic()
            try:
                response = self._client.get(url, params=params)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                raise ConnectionError_(f"Request to {endpoint} failed: {exc}") from exc
            elapsed_ms = int((time.monotonic() - start) * 1000)
            status = response.status_code

            if status == 429:
                output.debug(f"<- {status} ({elapsed_ms}ms) - Rate limited")
                if retries >= self._max_retries:
                    raise RateLimitError(
                        f"Rate limit exceeded. Maximum retries ({self._max_retries}) reached.\n\n"
                        "Slack API rate limits have been hit. Please wait a moment "
                        "before trying again."
                    )
                delay = _retry_after(response)
                output.info(
                    f"Rate limited. Waiting {delay} second(s) before retry "
                    f"{retries + 1}/{self._max_retries}..."
                )
                self._sleep(delay)
                retries += 1
                continue

            if not response.is_success:
                output.debug(f"<- {status} ({elapsed_ms}ms) - Failed")
                _raise_for_status(response)

            output.debug(f"<- {status} ({elapsed_ms}ms, {len(response.content)} bytes)")
            return response

    def _decode(self, endpoint: str, response: httpx.Response, response_model: type[T]) -> T:
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(f"Failed to parse response from {endpoint}") from exc

        if not isinstance(body, dict):
            raise DecodeError(f"Failed to parse response from {endpoint}")

        try:
            envelope = Envelope.model_validate(body)
        except ValidationError as exc:
            raise DecodeError(f"Failed to parse response from {endpoint}") from exc

        if not envelope.ok:
            raise ApiError(
                envelope.error or "unknown_error",
                needed=envelope.needed,
                provided=envelope.provided,
            )

        try:
            return response_model.model_validate(body)
        except ValidationError as exc:
            get_output().debug(f"Decode failure for {endpoint}: {exc}")
            raise DecodeError(f"Failed to parse response from {endpoint}") from exc


def _clean_params(params: Optional[dict[str, Any]]) -> dict[str, str]:
    """Drop ``None`` values and stringify the rest (booleans as ``true``/``false``)."""
    cleaned: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned


def _retry_after(response: httpx.Response) -> int:
    """Seconds to wait from the ``Retry-After`` header; 1 when missing, unparsable or negative."""
    raw = response.headers.get("Retry-After", "")
    try:
        seconds = int(raw.strip())
    except ValueError:
        return 1
    return seconds if seconds >= 0 else 1


def _raise_for_status(response: httpx.Response) -> None:
    status = response.status_code
    message = f"API request failed: HTTP {status} {response.reason_phrase or ''}".rstrip()
    if status in (401, 403):
        raise AuthError(message, status_code=status)
    if status == 404:
        raise NotFoundError(message, status_code=status)
    raise ServerError(message, status_code=status)
