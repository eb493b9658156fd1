"""MemoryStore: the rolling conversation log row, via libsql.

There is exactly one memory row shared by every allowed channel. Writes are
plain updates with no version check; callers that read-modify-write must
serialize themselves (see ``src.memory.updater``).
"""

from __future__ import annotations

import logging

from src.db import SqlStore
from src.models import MemorySummary

logger = logging.getLogger(__name__)


class MemoryStore(SqlStore):
    """Reads, replaces and clears the singleton ``memory`` row."""

    async def read(self) -> MemorySummary | None:
        """Return the memory row, or None if the table is empty."""
        db = await self._connect()
        try:
            cursor = await db.execute("SELECT id, summary FROM memory ORDER BY id LIMIT 1")
            row = await cursor.fetchone()
            return MemorySummary(id=row[0], summary=row[1] or "") if row else None
        finally:
            await db.close()

    async def read_by_id(self, memory_id: int) -> MemorySummary | None:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT id, summary FROM memory WHERE id = ?", (memory_id,)
            )
            row = await cursor.fetchone()
            return MemorySummary(id=row[0], summary=row[1] or "") if row else None
        finally:
            await db.close()

    async def write(self, memory_id: int, summary: str) -> bool:
        """Overwrite the summary of row *memory_id*. Returns True if a row changed."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                "UPDATE memory SET summary = ? WHERE id = ?", (summary, memory_id)
            )
            await db.commit()
            updated = cursor.rowcount > 0
            if not updated:
                logger.warning("Memory row %d not found; nothing written", memory_id)
            return updated
        finally:
            await db.close()

    async def clear(self) -> int:
        """Reset every memory row to empty. Returns the number of rows cleared."""
        db = await self._connect()
        try:
            cursor = await db.execute("UPDATE memory SET summary = ''")
            await db.commit()
            logger.info("Memory cleared")
            return cursor.rowcount
        finally:
            await db.close()
