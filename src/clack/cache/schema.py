"""SQLite schema for the entity cache, with ``PRAGMA user_version`` migrations.

Each entry in :data:`MIGRATIONS` is a SQL script. The database records how
many have been applied in ``user_version``; :func:`migrate` runs the rest in
order. Scripts are append-only: never edit one that has shipped.
"""

from __future__ import annotations

import sqlite3

MIGRATIONS: list[str] = [
    """
    CREATE TABLE users (
        id TEXT NOT NULL,
        workspace_id TEXT NOT NULL,
        name TEXT NOT NULL,
        real_name TEXT,
        deleted BOOLEAN NOT NULL DEFAULT 0,
        is_bot BOOLEAN NOT NULL DEFAULT 0,
        is_admin BOOLEAN,
        is_owner BOOLEAN,
        tz TEXT,
        profile_email TEXT,
        profile_display_name TEXT,
        profile_status_emoji TEXT,
        profile_status_text TEXT,
        profile_image_72 TEXT,
        full_object TEXT NOT NULL,
        cached_at REAL NOT NULL,
        deleted_at REAL,
        PRIMARY KEY (id, workspace_id)
    );
    CREATE INDEX idx_users_name ON users(workspace_id, name);
    CREATE INDEX idx_users_cached_at ON users(cached_at);

    CREATE TABLE conversations (
        id TEXT NOT NULL,
        workspace_id TEXT NOT NULL,
        name TEXT NOT NULL,
        is_channel BOOLEAN,
        is_group BOOLEAN,
        is_im BOOLEAN,
        is_mpim BOOLEAN,
        is_private BOOLEAN,
        is_archived BOOLEAN NOT NULL DEFAULT 0,
        topic_value TEXT,
        purpose_value TEXT,
        num_members INTEGER,
        full_object TEXT NOT NULL,
        cached_at REAL NOT NULL,
        deleted_at REAL,
        PRIMARY KEY (id, workspace_id)
    );
    CREATE INDEX idx_conversations_name ON conversations(workspace_id, name);
    CREATE INDEX idx_conversations_cached_at ON conversations(cached_at);

    CREATE TABLE messages (
        conversation_id TEXT NOT NULL,
        workspace_id TEXT NOT NULL,
        ts TEXT NOT NULL,
        user_id TEXT,
        text TEXT NOT NULL,
        thread_ts TEXT,
        permalink TEXT,
        full_object TEXT NOT NULL,
        cached_at REAL NOT NULL,
        deleted_at REAL,
        PRIMARY KEY (conversation_id, workspace_id, ts)
    );
    CREATE INDEX idx_messages_conversation ON messages(workspace_id, conversation_id);
    CREATE INDEX idx_messages_thread_ts ON messages(workspace_id, thread_ts);
    CREATE INDEX idx_messages_cached_at ON messages(cached_at);
    """,
]

SCHEMA_VERSION = len(MIGRATIONS)


def current_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version").fetchone()[0]


def migrate(conn: sqlite3.Connection) -> int:
    """Apply pending migrations to *conn* and return the resulting version.

    Each script runs inside its own transaction together with the
    ``user_version`` bump, so a failed script leaves the previous version
    intact.
    """
    version = current_version(conn)
    for number, script in enumerate(MIGRATIONS[version:], start=version + 1):
        conn.executescript(f"BEGIN;\n{script}\nPRAGMA user_version = {number};\nCOMMIT;")
    return current_version(conn)
