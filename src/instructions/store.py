"""InstructionsStore: the operator-authored system prompt."""

from __future__ import annotations

import logging

from src.db import SqlStore
from src.models import Instructions

logger = logging.getLogger(__name__)


class InstructionsStore(SqlStore):
    """Reads and replaces the singleton ``instructions`` row."""

    async def read(self) -> Instructions | None:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT id, content FROM instructions ORDER BY id LIMIT 1"
            )
            row = await cursor.fetchone()
            return Instructions(id=row[0], content=row[1] or "") if row else None
        finally:
            await db.close()

    async def write(self, content: str) -> Instructions:
        """Replace the instructions text, creating the row if needed."""
        current = await self.read()
        db = await self._connect()
        try:
            if current is None:
                await db.execute("INSERT INTO instructions (content) VALUES (?)", (content,))
                row_id = await db.last_insert_id()
            else:
                row_id = current.id
                await db.execute(
                    "UPDATE instructions SET content = ? WHERE id = ?", (content, row_id)
                )
            await db.commit()
            logger.info("Instructions updated (%d chars)", len(content))
            return Instructions(id=row_id, content=content)
        finally:
            await db.close()
