"""Tests for the Discord client factory and message wrapper."""

from unittest.mock import AsyncMock, MagicMock

from src.bot.discord.app import create_client
from src.bot.discord.message import DiscordMessage
from src.bot.messages import IncomingMessage


def _discord_message(content: str = "hi", channel_id: int = 123, bot: bool = False) -> MagicMock:
    message = MagicMock()
    message.content = content
    message.channel = MagicMock(id=channel_id)
    message.author = MagicMock(bot=bot)
    message.author.__str__.return_value = "tester#0001"
    message.reply = AsyncMock()
    return message


class TestDiscordMessage:
    def test_exposes_fields(self):
        wrapped = DiscordMessage(_discord_message("hello", 42))
        assert wrapped.channel_id == "42"
        assert wrapped.content == "hello"
        assert wrapped.author == "tester#0001"
        assert wrapped.author_is_bot is False

    def test_satisfies_protocol(self):
        assert isinstance(DiscordMessage(_discord_message()), IncomingMessage)

    def test_none_content_becomes_empty(self):
        raw = _discord_message()
        raw.content = None
        assert DiscordMessage(raw).content == ""

    async def test_reply_suppresses_mentions(self):
        raw = _discord_message()
        await DiscordMessage(raw).reply("hey @everyone")

        raw.reply.assert_awaited_once()
        args, kwargs = raw.reply.call_args
        assert args == ("hey @everyone",)
        mentions = kwargs["allowed_mentions"]
        assert mentions.everyone is False
        assert mentions.users is False
        assert mentions.roles is False


class TestCreateClient:
    async def test_message_content_intent_enabled(self):
        client = create_client(MagicMock())
        assert client.intents.message_content is True

    async def test_on_message_forwards_to_pipeline(self):
        pipeline = MagicMock()
        pipeline.handle = AsyncMock()
        client = create_client(pipeline)

        raw = _discord_message("hello", 123)
        await client.on_message(raw)

        pipeline.handle.assert_awaited_once()
        forwarded = pipeline.handle.call_args.args[0]
        assert isinstance(forwarded, DiscordMessage)
        assert forwarded.channel_id == "123"
        assert forwarded.content == "hello"

    async def test_bot_messages_reach_pipeline_flagged(self):
        pipeline = MagicMock()
        pipeline.handle = AsyncMock()
        client = create_client(pipeline)

        await client.on_message(_discord_message(bot=True))

        forwarded = pipeline.handle.call_args.args[0]
        assert forwarded.author_is_bot is True
