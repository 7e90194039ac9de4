"""The access context threaded through every entity operation.

A :class:`ClientContext` is produced once per command, after the workspace
session has been initialised. It bundles the dispatcher, the established
:class:`~clack.models.Workspace` identity, the optional local store and the
freshness policy. Its cache helpers never raise: a store failure is logged
in verbose mode and treated as a miss (for reads) or skipped (for writes).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from clack.cache.freshness import EntityKind, FreshnessPolicy
from clack.cache.store import Key, LocalStore, Record
from clack.client.dispatcher import Dispatcher
from clack.exceptions import CacheError
from clack.models import Workspace
from clack.output import get_output

DEFAULT_PAGE_SIZE = 200


@dataclass(frozen=True)
class ClientContext:
    """Immutable bundle of everything an operation needs.

    Attributes:
        dispatcher: Sends API requests.
        workspace: The identity returned by ``auth.test``.
        policy: Per-kind TTLs.
        store: The local cache, or ``None`` when caching is disabled.
        refresh: When set, cached reads are skipped; writes still happen.
        page_size: Default ``limit`` for cursor-paginated listings.
    """

    dispatcher: Dispatcher
    workspace: Workspace
    policy: FreshnessPolicy = FreshnessPolicy()
    store: Optional[LocalStore] = None
    refresh: bool = False
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def workspace_id(self) -> str:
        return self.workspace.team_id

    def read(
        self,
        kind: EntityKind,
        key: Key,
        ttl_override: Optional[float] = None,
    ) -> Optional[Record]:
        """Return a fresh cached record, or ``None`` on any kind of miss."""
        if self.store is None or self.refresh:
            return None
        try:
            return self.store.get(kind, self.workspace_id, key, ttl_override)
        except CacheError as exc:
            get_output().debug(f"[cache] Read failed, treating as miss: {exc}")
            return None

    def read_all(
        self,
        kind: EntityKind,
        ttl_override: Optional[float] = None,
        conversation_id: Optional[str] = None,
        thread_ts: Optional[str] = None,
    ) -> Optional[list[Record]]:
        """Return the full fresh cached set of *kind*, or ``None``."""
        if self.store is None or self.refresh:
            return None
        try:
            return self.store.get_all(
                kind,
                self.workspace_id,
                ttl_override=ttl_override,
                conversation_id=conversation_id,
                thread_ts=thread_ts,
            )
        except CacheError as exc:
            get_output().debug(f"[cache] Read failed, treating as miss: {exc}")
            return None

    def write(
        self,
        kind: EntityKind,
        records: Iterable[Record],
        conversation_id: Optional[str] = None,
    ) -> None:
        """Write *records* through to the store. Failures are logged and skipped."""
        if self.store is None:
            return
        try:
            self.store.upsert_many(kind, self.workspace_id, records, conversation_id)
        except CacheError as exc:
            get_output().debug(f"[cache] Write skipped: {exc}")
