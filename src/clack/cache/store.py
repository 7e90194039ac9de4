"""SQLite-backed entity cache, partitioned by workspace.

:class:`LocalStore` keeps one table per :class:`~clack.cache.freshness.EntityKind`.
Each row holds a few projected index columns used for filtering, the full
JSON snapshot of the record (``full_object``) and the epoch time it was
written (``cached_at``). Rows are only ever created or replaced in full by
write-through from successful API reads.

Every operation opens its own connection, does its work, commits and
closes. Nothing is held open between calls, so a long-running process never
keeps a lock on the database file.

Failures (SQLite errors, undecodable snapshots) are raised as
:class:`~clack.exceptions.CacheError`. Callers in the access layer turn
those into cache misses.
"""

from __future__ import annotations

import sqlite3
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ValidationError

from clack.cache.freshness import EntityKind, FreshnessPolicy, is_fresh
from clack.cache.schema import current_version, migrate
from clack.exceptions import CacheError
from clack.models import Conversation, Message, User
from clack.output import get_output

Record = Union[User, Conversation, Message]
Key = Union[str, tuple[str, str]]

_RECORD_TYPES: dict[EntityKind, type[BaseModel]] = {
    EntityKind.USERS: User,
    EntityKind.CONVERSATIONS: Conversation,
    EntityKind.MESSAGES: Message,
}

_UPSERT_SQL = {
    EntityKind.USERS: (
        "INSERT OR REPLACE INTO users (id, workspace_id, name, real_name, deleted, "
        "is_bot, is_admin, is_owner, tz, profile_email, profile_display_name, "
        "profile_status_emoji, profile_status_text, profile_image_72, full_object, "
        "cached_at, deleted_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, NULL)"
    ),
    EntityKind.CONVERSATIONS: (
        "INSERT OR REPLACE INTO conversations (id, workspace_id, name, is_channel, "
        "is_group, is_im, is_mpim, is_private, is_archived, topic_value, purpose_value, "
        "num_members, full_object, cached_at, deleted_at) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, NULL)"
    ),
    EntityKind.MESSAGES: (
        "INSERT OR REPLACE INTO messages (conversation_id, workspace_id, ts, user_id, "
        "text, thread_ts, permalink, full_object, cached_at, deleted_at) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, NULL)"
    ),
}


def _user_row(user: User, workspace_id: str, snapshot: str, now: float) -> tuple[Any, ...]:
    p = user.profile
    return (
        user.id, workspace_id, user.name, user.real_name, user.deleted, user.is_bot,
        user.is_admin, user.is_owner, user.tz, p.email, p.display_name,
        p.status_emoji, p.status_text, p.image_72, snapshot, now,
    )


def _conversation_row(
    conv: Conversation, workspace_id: str, snapshot: str, now: float
) -> tuple[Any, ...]:
    return (
        conv.id, workspace_id, conv.name, conv.is_channel, conv.is_group, conv.is_im,
        conv.is_mpim, conv.is_private, bool(conv.is_archived),
        conv.topic.value if conv.topic else None,
        conv.purpose.value if conv.purpose else None,
        conv.num_members, snapshot, now,
    )


def _message_row(
    msg: Message, workspace_id: str, conversation_id: str, snapshot: str, now: float
) -> tuple[Any, ...]:
    return (
        conversation_id, workspace_id, msg.ts, msg.user, msg.text, msg.thread_ts,
        msg.permalink, snapshot, now,
    )


class LocalStore:
    """Workspace-partitioned, TTL-checked entity cache in a SQLite file.

    Use :meth:`open` to create the database and apply migrations; the
    constructor alone does not touch the file.

    Args:
        path: Location of the SQLite database file.
        policy: TTLs used when a read does not pass an explicit override.
        clock: Returns the current epoch time in seconds; injectable for tests.
    """

    def __init__(
        self,
        path: Union[str, Path],
        policy: Optional[FreshnessPolicy] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._path = Path(path)
        self._policy = policy or FreshnessPolicy()
        self._clock = clock

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        policy: Optional[FreshnessPolicy] = None,
        clock: Callable[[], float] = time.time,
    ) -> LocalStore:
        """Create the database if needed, enable WAL, and apply pending migrations.

        Raises:
            CacheError: If the file cannot be created or migrated.
        """
        store = cls(path, policy=policy, clock=clock)
        try:
            store._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheError(f"Cannot create cache directory for {store._path}: {exc}") from exc
        with store._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            version = migrate(conn)
        get_output().debug(f"[cache] Opened {store._path} (schema v{version})")
        return store

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn: Optional[sqlite3.Connection] = None
        try:
            conn = sqlite3.connect(str(self._path), timeout=5)
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            raise CacheError(f"Cache database error: {exc}") from exc
        finally:
            if conn is not None:
                conn.close()

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def get(
        self,
        kind: EntityKind,
        workspace_id: str,
        key: Key,
        ttl_override: Optional[float] = None,
    ) -> Optional[Record]:
        """Return one cached record, or ``None`` if absent, soft-deleted, or stale.

        Args:
            kind: Entity kind to read.
            workspace_id: Workspace partition.
            key: The entity ID, or ``(conversation_id, ts)`` for messages.
            ttl_override: TTL to use instead of the policy's value for *kind*.
        """
        if kind is EntityKind.MESSAGES:
            if not isinstance(key, tuple):
                raise CacheError("Message keys are (conversation_id, ts) pairs")
            sql = (
                "SELECT full_object, cached_at FROM messages WHERE workspace_id = ? "
                "AND conversation_id = ? AND ts = ? AND deleted_at IS NULL"
            )
            args: tuple[Any, ...] = (workspace_id, key[0], key[1])
        else:
            sql = (
                f"SELECT full_object, cached_at FROM {kind.value} "
                "WHERE workspace_id = ? AND id = ? AND deleted_at IS NULL"
            )
            args = (workspace_id, key)

        with self._connect() as conn:
            row = conn.execute(sql, args).fetchone()

        output = get_output()
        if row is None:
            output.debug(f"[cache] MISS {kind.value} {key}")
            return None

        ttl = self._policy.ttl_for(kind, ttl_override)
        age = self._clock() - row[1]
        if not is_fresh(age, ttl):
            output.debug(f"[cache] STALE {kind.value} {key} (age {age:.0f}s, ttl {ttl}s)")
            return None

        output.debug(f"[cache] HIT {kind.value} {key}")
        return self._decode(kind, row[0])

    def get_all(
        self,
        kind: EntityKind,
        workspace_id: str,
        ttl_override: Optional[float] = None,
        conversation_id: Optional[str] = None,
        thread_ts: Optional[str] = None,
    ) -> Optional[list[Record]]:
        """Return every cached record of *kind* in the workspace, all-or-nothing.

        The result is ``None`` when no rows match or when any matching row is
        stale: a partially fresh set is never returned. Users and
        conversations come back ordered by name; messages newest first.

        Args:
            kind: Entity kind to read.
            workspace_id: Workspace partition.
            ttl_override: TTL to use instead of the policy's value for *kind*.
            conversation_id: Restrict messages to one conversation.
            thread_ts: Restrict messages to one thread (the parent and its
                replies). Requires *conversation_id*.
        """
        clauses = ["workspace_id = ?", "deleted_at IS NULL"]
        args: list[Any] = [workspace_id]
        if kind is EntityKind.MESSAGES:
            if conversation_id is not None:
                clauses.append("conversation_id = ?")
                args.append(conversation_id)
            if thread_ts is not None:
                clauses.append("(thread_ts = ? OR ts = ?)")
                args.extend([thread_ts, thread_ts])
            order = "CAST(ts AS REAL) DESC"
        else:
            order = "name"

        sql = (
            f"SELECT full_object, cached_at FROM {kind.value} "
            f"WHERE {' AND '.join(clauses)} ORDER BY {order}"
        )
        with self._connect() as conn:
            rows = conn.execute(sql, args).fetchall()

        output = get_output()
        scope = kind.value if conversation_id is None else f"{kind.value} in {conversation_id}"
        if not rows:
            output.debug(f"[cache] MISS all {scope}")
            return None

        ttl = self._policy.ttl_for(kind, ttl_override)
        now = self._clock()
        stale = sum(1 for _, cached_at in rows if not is_fresh(now - cached_at, ttl))
        if stale:
            output.debug(f"[cache] STALE all {scope} ({stale}/{len(rows)} rows expired)")
            return None

        output.debug(f"[cache] HIT all {scope} ({len(rows)} rows)")
        return [self._decode(kind, snapshot) for snapshot, _ in rows]

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def upsert(
        self,
        kind: EntityKind,
        workspace_id: str,
        record: Record,
        conversation_id: Optional[str] = None,
    ) -> None:
        """Insert or fully replace one record, stamping ``cached_at`` with now."""
        row = self._row(kind, workspace_id, record, conversation_id)
        with self._connect() as conn:
            conn.execute(_UPSERT_SQL[kind], row)

    def upsert_many(
        self,
        kind: EntityKind,
        workspace_id: str,
        records: Iterable[Record],
        conversation_id: Optional[str] = None,
    ) -> int:
        """Upsert each record, committing rows independently. Returns the count written."""
        count = 0
        with self._connect() as conn:
            for record in records:
                conn.execute(_UPSERT_SQL[kind], self._row(kind, workspace_id, record, conversation_id))
                conn.commit()
                count += 1
        get_output().debug(f"[cache] Upserted {count} {kind.value}")
        return count

    def clear_workspace(self, workspace_id: str) -> int:
        """Delete every row belonging to *workspace_id*. Returns rows removed."""
        removed = 0
        with self._connect() as conn:
            for kind in EntityKind:
                cur = conn.execute(f"DELETE FROM {kind.value} WHERE workspace_id = ?", (workspace_id,))
                removed += cur.rowcount
        get_output().debug(f"[cache] Cleared {removed} rows for workspace {workspace_id}")
        return removed

    def clear_all(self) -> int:
        """Delete every row in every workspace. Returns rows removed."""
        removed = 0
        with self._connect() as conn:
            for kind in EntityKind:
                removed += conn.execute(f"DELETE FROM {kind.value}").rowcount
        get_output().debug(f"[cache] Cleared {removed} rows")
        return removed

    def stats(self, workspace_id: Optional[str] = None) -> dict[str, Any]:
        """Return row counts per table plus the file path, size and schema version."""
        counts: dict[str, int] = {}
        with self._connect() as conn:
            for kind in EntityKind:
                if workspace_id is None:
                    sql = f"SELECT COUNT(*) FROM {kind.value} WHERE deleted_at IS NULL"
                    args: tuple[Any, ...] = ()
                else:
                    sql = (
                        f"SELECT COUNT(*) FROM {kind.value} "
                        "WHERE workspace_id = ? AND deleted_at IS NULL"
                    )
                    args = (workspace_id,)
                counts[kind.value] = conn.execute(sql, args).fetchone()[0]
            version = current_version(conn)
        return {
            "path": str(self._path),
            "size_bytes": self._path.stat().st_size if self._path.exists() else 0,
            "schema_version": version,
            **counts,
        }

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _row(
        self,
        kind: EntityKind,
        workspace_id: str,
        record: Record,
        conversation_id: Optional[str],
    ) -> tuple[Any, ...]:
        snapshot = record.model_dump_json(by_alias=True)
        now = self._clock()
        if isinstance(record, User):
            return _user_row(record, workspace_id, snapshot, now)
        if isinstance(record, Conversation):
            return _conversation_row(record, workspace_id, snapshot, now)
        channel_id = conversation_id or (record.channel.id if record.channel else None)
        if channel_id is None:
            raise CacheError(f"Cannot cache message {record.ts} without a conversation ID")
        return _message_row(record, workspace_id, channel_id, snapshot, now)

    @staticmethod
    def _decode(kind: EntityKind, snapshot: str) -> Record:
        try:
            return _RECORD_TYPES[kind].model_validate_json(snapshot)  # type: ignore[return-value]
        except ValidationError as exc:
            raise CacheError(f"Corrupt {kind.value} snapshot in cache: {exc}") from exc
