"""KnowledgeStore: metadata rows for uploaded reference files, via libsql."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from src.db import SqlStore
from src.models import KnowledgeFile

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, storage_path, size, content, created_at"


def _from_row(row: tuple) -> KnowledgeFile:
    return KnowledgeFile(
        id=row[0],
        name=row[1],
        storage_path=row[2],
        size=row[3] or 0,
        content=row[4],
        created_at=row[5] or "",
    )


class KnowledgeStore(SqlStore):
    """Reads and edits the ``knowledge_files`` table."""

    async def list_files(self, limit: int | None = None) -> list[KnowledgeFile]:
        """Return knowledge files, oldest first, at most *limit* of them."""
        db = await self._connect()
        try:
            if limit is None:
                cursor = await db.execute(f"SELECT {_COLUMNS} FROM knowledge_files ORDER BY id")
            else:
                cursor = await db.execute(
                    f"SELECT {_COLUMNS} FROM knowledge_files ORDER BY id LIMIT ?",
                    (max(limit, 0),),
                )
            rows = await cursor.fetchall()
            return [_from_row(row) for row in rows]
        finally:
            await db.close()

    async def get_by_id(self, file_id: int) -> KnowledgeFile | None:
        db = await self._connect()
        try:
            cursor = await db.execute(
                f"SELECT {_COLUMNS} FROM knowledge_files WHERE id = ?", (file_id,)
            )
            row = await cursor.fetchone()
            return _from_row(row) if row else None
        finally:
            await db.close()

    async def add(
        self, name: str, storage_path: str, size: int, content: str | None = None
    ) -> KnowledgeFile:
        """Insert a file record. Returns the stored row."""
        created_at = datetime.now(UTC).isoformat()
        db = await self._connect()
        try:
            await db.execute(
                """
                INSERT INTO knowledge_files (name, storage_path, size, content, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name, storage_path, size, content, created_at),
            )
            file_id = await db.last_insert_id()
            await db.commit()
            logger.info("Added knowledge file %s (%d bytes)", name, size)
            return KnowledgeFile(
                id=file_id,
                name=name,
                storage_path=storage_path,
                size=size,
                content=content,
                created_at=created_at,
            )
        finally:
            await db.close()

    async def delete(self, file_id: int) -> bool:
        """Delete a file record. Returns True if a row was removed."""
        db = await self._connect()
        try:
            cursor = await db.execute("DELETE FROM knowledge_files WHERE id = ?", (file_id,))
            await db.commit()
            return cursor.rowcount > 0
        finally:
            await db.close()
