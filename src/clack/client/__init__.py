"""HTTP dispatch for clack.

Provides :class:`Dispatcher`, a blocking client backed by
:class:`httpx.Client` that adds bearer auth, rate-limit backoff, status and
API error mapping, and typed response decoding.

Example::

    from clack.client import Dispatcher

    with Dispatcher(base_url, token) as dispatcher:
        resp = dispatcher.call("auth.test", None, AuthTestResponse)
"""

from clack.client.dispatcher import DEFAULT_BASE_URL, Dispatcher

__all__ = ["DEFAULT_BASE_URL", "Dispatcher"]
