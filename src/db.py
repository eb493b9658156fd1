"""Async access to the Relay store over libsql.

The synchronous ``libsql`` driver is pushed onto worker threads with
``asyncio.to_thread()``.  The target is chosen from settings:

- **Production**: ``TURSO_DATABASE_URL`` + ``TURSO_AUTH_TOKEN`` → remote Turso
- **Dev/test**: no Turso env vars → local SQLite file via ``database_path``

The four tables the bot reads are created on first use by :func:`ensure_schema`.
The two singleton tables (``instructions`` and ``memory``) are seeded with
one empty row so readers always find a record to update.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import libsql

if TYPE_CHECKING:
    from pathlib import Path

from src.config import settings

SCHEMA: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS allowlist (
        id         INTEGER PRIMARY KEY AUTOINCREMENT,
        channel_id TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS instructions (
        id      INTEGER PRIMARY KEY,
        content TEXT NOT NULL DEFAULT ''
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS memory (
        id      INTEGER PRIMARY KEY,
        summary TEXT NOT NULL DEFAULT ''
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS knowledge_files (
        id           INTEGER PRIMARY KEY AUTOINCREMENT,
        name         TEXT NOT NULL,
        storage_path TEXT NOT NULL,
        size         INTEGER NOT NULL DEFAULT 0,
        content      TEXT,
        created_at   TEXT NOT NULL
    )
    """,
    "INSERT OR IGNORE INTO instructions (id, content) VALUES (1, '')",
    "INSERT OR IGNORE INTO memory (id, summary) VALUES (1, '')",
)


class _AsyncCursor:
    """Async facade over a libsql cursor."""

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor

    async def fetchone(self) -> tuple | None:
        return await asyncio.to_thread(self._cursor.fetchone)

    async def fetchall(self) -> list[tuple]:
        return await asyncio.to_thread(self._cursor.fetchall)

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount


class _AsyncConnection:
    """Async facade over a libsql connection."""

    def __init__(self, conn: Any) -> None:
        self._conn = conn

    async def execute(self, sql: str, params: tuple = ()) -> _AsyncCursor:
        cursor = await asyncio.to_thread(self._conn.execute, sql, params)
        return _AsyncCursor(cursor)

    async def last_insert_id(self) -> int:
        """Row id of the most recent INSERT on this connection."""
        cursor = await self.execute("SELECT last_insert_rowid()")
        row = await cursor.fetchone()
        return int(row[0]) if row else 0

    async def commit(self) -> None:
        await asyncio.to_thread(self._conn.commit)

    async def close(self) -> None:
        await asyncio.to_thread(self._conn.close)


def _open_local(path: str) -> Any:
    """Open a local libsql connection with WAL mode and busy timeout."""
    conn = libsql.connect(path)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA busy_timeout=5000")
    return conn


async def get_connection(local_path_override: Path | None = None) -> _AsyncConnection:
    """Return an async-wrapped libsql connection.

    *local_path_override* (test isolation) wins over everything else; then
    ``TURSO_DATABASE_URL``; then the local ``database_path`` file.
    """
    if local_path_override:
        local_path_override.parent.mkdir(parents=True, exist_ok=True)
        conn = await asyncio.to_thread(_open_local, str(local_path_override))
        return _AsyncConnection(conn)

    if settings.turso_database_url:
        conn = await asyncio.to_thread(
            libsql.connect,
            database=settings.turso_database_url,
            auth_token=settings.turso_auth_token,
        )
        return _AsyncConnection(conn)

    settings.database_path.parent.mkdir(parents=True, exist_ok=True)
    conn = await asyncio.to_thread(_open_local, str(settings.database_path))
    return _AsyncConnection(conn)


async def ensure_schema(conn: _AsyncConnection) -> None:
    """Create missing tables and seed the singleton rows. Idempotent."""
    for statement in SCHEMA:
        await conn.execute(statement)
    await conn.commit()


class SqlStore:
    """Base for the table stores.

    Each subclass is a singleton accessed via ``get()``.  Pass an explicit
    *db_path* for test isolation (e.g. ``tmp_path / "test.db"``).
    """

    _instance: SqlStore | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._instance = None

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path
        self._initialised = False

    @classmethod
    def get(cls):  # noqa: ANN206
        """Return the shared instance of this store."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    async def _connect(self) -> _AsyncConnection:
        db = await get_connection(local_path_override=self._db_path)
        if not self._initialised:
            await ensure_schema(db)
            self._initialised = True
        return db
