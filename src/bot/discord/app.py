"""Discord client factory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from src.bot.discord.message import DiscordMessage

if TYPE_CHECKING:
    from src.bot.pipeline import Pipeline

logger = logging.getLogger(__name__)


def create_client(pipeline: Pipeline) -> discord.Client:
    """Build a Discord client that feeds every message into *pipeline*.

    The pipeline decides which messages to drop, bot messages included.

    discord.py runs each event handler as its own task, so messages are
    processed concurrently on the one event loop.
    """
    intents = discord.Intents.default()
    intents.message_content = True
    client = discord.Client(intents=intents)

    @client.event
    async def on_ready() -> None:
        logger.info("Bot logged in as %s", client.user)

    @client.event
    async def on_message(message: discord.Message) -> None:
        await pipeline.handle(DiscordMessage(message))

    return client
