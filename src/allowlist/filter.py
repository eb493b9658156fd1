"""Channel allowlist security gate."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.allowlist.store import AllowlistStore

logger = logging.getLogger(__name__)


class AllowlistFilter:
    """Decides whether a channel may receive bot replies.

    The allowlist is re-read on every call so operator edits apply to the
    next message without a restart.
    """

    def __init__(self, store: AllowlistStore) -> None:
        self._store = store

    async def admit(self, channel_id: str) -> bool:
        """Return True if *channel_id* is allowlisted.

        Denials are silent toward the sender. If the allowlist can't be read
        the message is denied as well.
        """
        try:
            allowed = await self._store.list_channel_ids()
        except Exception:
            logger.exception("Could not read allowlist; denying channel %s", channel_id)
            return False

        if channel_id not in allowed:
            logger.info("Channel not in allowlist (%s)", channel_id)
            return False

        return True
