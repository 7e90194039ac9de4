"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~clack.exceptions.ClackError` subclass.
External tooling (CI scripts, shell wrappers) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ clack users info @nobody
    $ echo $?
    4   # EXIT_NOT_FOUND -- no user with that handle
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an ambiguous identifier."""

EXIT_AUTH_FAILURE = 3
"""Authentication or authorisation failed."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404 or a failed name lookup)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned a non-2xx HTTP status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_RATE_LIMITED = 7
"""The rate-limit retry budget was exhausted."""

EXIT_API_ERROR = 8
"""The API answered ``ok: false`` with a non-authentication error code."""

EXIT_DECODE_ERROR = 9
"""A response body did not match the expected shape."""
