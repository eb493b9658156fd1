"""Reply delivery with fixed-width chunking for the platform size limit."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.bot.messages import IncomingMessage

logger = logging.getLogger(__name__)

MESSAGE_CHAR_LIMIT = 2000
CHUNK_SIZE = 1990


def split_reply(
    text: str, limit: int = MESSAGE_CHAR_LIMIT, chunk_size: int = CHUNK_SIZE
) -> list[str]:
    """Split *text* into sendable chunks.

    Text within *limit* is returned whole. Longer text is cut every
    *chunk_size* characters, without regard for word boundaries.
    """
    if len(text) <= limit:
        return [text]
    return [text[i : i + chunk_size] for i in range(0, len(text), chunk_size)]


@dataclass
class DeliveryReport:
    """How much of a reply reached the channel."""

    sent: int
    total: int

    @property
    def complete(self) -> bool:
        return self.sent == self.total


async def deliver_reply(
    message: IncomingMessage,
    text: str,
    *,
    limit: int = MESSAGE_CHAR_LIMIT,
    chunk_size: int = CHUNK_SIZE,
) -> DeliveryReport:
    """Send *text* as one or more replies, in order.

    Chunks go out one at a time. The first failed send is logged and ends
    delivery, so a later chunk is never posted ahead of an earlier one.
    """
    chunks = split_reply(text, limit, chunk_size)
    if len(chunks) > 1:
        logger.info("Reply is %d chars; sending %d chunks", len(text), len(chunks))

    for index, chunk in enumerate(chunks):
        try:
            await message.reply(chunk)
        except Exception:
            logger.exception(
                "Failed to send chunk %d/%d to channel %s",
                index + 1,
                len(chunks),
                message.channel_id,
            )
            return DeliveryReport(sent=index, total=len(chunks))

    return DeliveryReport(sent=len(chunks), total=len(chunks))
