"""Local entity cache for clack.

:class:`LocalStore` persists users, conversations and messages in a SQLite
file, partitioned by workspace ID. :class:`FreshnessPolicy` decides how long
a cached row may be served before the API is consulted again.
"""

from clack.cache.freshness import INFINITE_TTL, EntityKind, FreshnessPolicy, is_fresh
from clack.cache.store import LocalStore

__all__ = ["INFINITE_TTL", "EntityKind", "FreshnessPolicy", "LocalStore", "is_fresh"]
