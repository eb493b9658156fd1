"""AllowlistStore: channels permitted to receive replies, via libsql."""

from __future__ import annotations

import logging

from src.db import SqlStore
from src.models import AllowlistEntry

logger = logging.getLogger(__name__)


class AllowlistStore(SqlStore):
    """Reads and edits the ``allowlist`` table.

    The pipeline only reads; ``add`` and ``remove`` serve the operator CLI.
    """

    async def list_entries(self) -> list[AllowlistEntry]:
        """Return every allowlist row, oldest first."""
        db = await self._connect()
        try:
            cursor = await db.execute("SELECT id, channel_id FROM allowlist ORDER BY id")
            rows = await cursor.fetchall()
            return [AllowlistEntry(id=row[0], channel_id=str(row[1])) for row in rows]
        finally:
            await db.close()

    async def list_channel_ids(self) -> set[str]:
        """Return the set of allowed channel identifiers."""
        return {entry.channel_id for entry in await self.list_entries()}

    async def add(self, channel_id: str) -> AllowlistEntry:
        """Insert a channel. Returns the existing row if it is already present."""
        channel_id = channel_id.strip()
        if not channel_id:
            msg = "channel_id must not be empty"
            raise ValueError(msg)

        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT id FROM allowlist WHERE channel_id = ?", (channel_id,)
            )
            existing = await cursor.fetchone()
            if existing:
                return AllowlistEntry(id=existing[0], channel_id=channel_id)

            await db.execute("INSERT INTO allowlist (channel_id) VALUES (?)", (channel_id,))
            entry_id = await db.last_insert_id()
            await db.commit()
            logger.info("Allowed channel %s (entry %d)", channel_id, entry_id)
            return AllowlistEntry(id=entry_id, channel_id=channel_id)
        finally:
            await db.close()

    async def remove(self, channel_id: str) -> bool:
        """Remove every row for *channel_id*. Returns True if any row was deleted."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                "DELETE FROM allowlist WHERE channel_id = ?", (channel_id.strip(),)
            )
            await db.commit()
            removed = cursor.rowcount > 0
            if removed:
                logger.info("Removed channel %s from allowlist", channel_id)
            return removed
        finally:
            await db.close()
