"""Append completed exchanges to the rolling memory.

Each exchange is stored as::

    \\nUser: {message}\\nBot: {reply}

The append is a read-modify-write on a shared row. Every message runs as its
own task, so two exchanges finishing close together would otherwise both
read the old summary and the second write would drop the first exchange.
``MemoryUpdater`` holds one ``asyncio.Lock`` per memory row and re-reads the
row under that lock before appending.

With a cap set, the updater remembers the exchanges it wrote to each row and
trims by that list. The stored text is only re-parsed when it no longer
matches (first write after startup, or an edit from outside the process).
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.memory.store import MemoryStore

logger = logging.getLogger(__name__)

_USER_PREFIX = "\nUser: "
_BOT_PREFIX = "\nBot: "

# Candidate exchange boundaries; see split_exchanges.
_EXCHANGE_START = re.compile(r"(?=\nUser: )")


def format_exchange(user_message: str, reply: str) -> str:
    return f"{_USER_PREFIX}{user_message}{_BOT_PREFIX}{reply}"


def split_exchanges(summary: str) -> list[str]:
    """Split *summary* into exchanges.

    A ``"\\nUser: "`` line opens a new exchange only once the current one has
    its ``"\\nBot: "`` line, so a message that itself contains ``"\\nUser: "``
    stays whole. Text before the first exchange (e.g. a hand-written
    preamble) is kept as its own entry.
    """
    exchanges: list[str] = []
    for part in _EXCHANGE_START.split(summary):
        if not part:
            continue
        last = exchanges[-1] if exchanges else ""
        if last.startswith(_USER_PREFIX) and _BOT_PREFIX not in last:
            exchanges[-1] = last + part
        else:
            exchanges.append(part)
    return exchanges


def trim_exchanges(summary: str, max_exchanges: int) -> str:
    """Keep only the last *max_exchanges* exchanges of *summary*.

    ``max_exchanges <= 0`` means no limit.
    """
    if max_exchanges <= 0:
        return summary
    exchanges = split_exchanges(summary)
    if len(exchanges) <= max_exchanges:
        return summary
    return "".join(exchanges[-max_exchanges:])


class MemoryUpdater:
    """Serializes memory appends per memory row."""

    def __init__(self, store: MemoryStore, max_exchanges: int = 0) -> None:
        self._store = store
        self._max_exchanges = max_exchanges
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._written: dict[int, list[str]] = {}

    def _exchanges_for(self, memory_id: int, summary: str) -> list[str]:
        known = self._written.get(memory_id)
        if known is not None and "".join(known) == summary:
            return list(known)
        return split_exchanges(summary)

    async def append_exchange(
        self, memory_id: int | None, user_message: str, reply: str
    ) -> str | None:
        """Append one exchange to row *memory_id* and persist it.

        Returns the new summary, or None if nothing was written. Store
        failures are logged and swallowed: the user already has their reply.
        """
        if memory_id is None:
            logger.warning("No memory row was read for this message; skipping update")
            return None

        async with self._locks[memory_id]:
            try:
                current = await self._store.read_by_id(memory_id)
                if current is None:
                    logger.warning("Memory row %d disappeared; skipping update", memory_id)
                    return None

                exchange = format_exchange(user_message, reply)
                if self._max_exchanges > 0:
                    exchanges = self._exchanges_for(memory_id, current.summary)
                    exchanges.append(exchange)
                    exchanges = exchanges[-self._max_exchanges :]
                    summary = "".join(exchanges)
                else:
                    exchanges = None
                    summary = current.summary + exchange

                if not await self._store.write(memory_id, summary):
                    return None
                if exchanges is not None:
                    self._written[memory_id] = exchanges
            except Exception:
                logger.exception("Failed to persist memory row %d", memory_id)
                return None

        logger.info("Memory updated (%d chars)", len(summary))
        return summary
