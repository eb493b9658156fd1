"""Discord implementation of the IncomingMessage protocol."""

from __future__ import annotations

import discord


class DiscordMessage:
    """Wraps a ``discord.Message`` for the pipeline."""

    def __init__(self, message: discord.Message) -> None:
        self._message = message

    @property
    def channel_id(self) -> str:
        return str(self._message.channel.id)

    @property
    def content(self) -> str:
        return self._message.content or ""

    @property
    def author(self) -> str:
        return str(self._message.author)

    @property
    def author_is_bot(self) -> bool:
        return bool(self._message.author.bot)

    async def reply(self, text: str) -> None:
        # Replies never ping anyone, whatever the model wrote.
        await self._message.reply(text, allowed_mentions=discord.AllowedMentions.none())
