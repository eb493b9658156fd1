"""Tests for reply chunking and ordered delivery."""

import asyncio
import random

from src.bot.delivery import deliver_reply, split_reply


class _Recorder:
    """Minimal IncomingMessage that records replies."""

    channel_id = "123"
    content = "hi"
    author = "tester#0001"
    author_is_bot = False

    def __init__(self, fail_on: int | None = None, jitter: bool = False) -> None:
        self.sent: list[str] = []
        self._fail_on = fail_on
        self._jitter = jitter

    async def reply(self, text: str) -> None:
        if self._jitter:
            await asyncio.sleep(random.random() / 1000)
        if self._fail_on is not None and len(self.sent) == self._fail_on:
            raise ConnectionError("send failed")
        self.sent.append(text)


# -- split_reply ---------------------------------------------------------------


def test_short_reply_single_chunk() -> None:
    assert split_reply("hello") == ["hello"]


def test_exactly_at_limit_single_chunk() -> None:
    text = "a" * 2000
    assert split_reply(text) == [text]


def test_over_limit_fixed_width() -> None:
    text = "".join(chr(ord("a") + i % 26) for i in range(4500))
    chunks = split_reply(text)

    assert "".join(chunks) == text
    assert all(len(c) <= 1990 for c in chunks)
    assert [len(c) for c in chunks] == [1990, 1990, 520]


def test_split_ignores_word_boundaries() -> None:
    text = "word " * 500  # 2500 chars
    chunks = split_reply(text)
    assert chunks[0] == text[:1990]


def test_just_over_limit() -> None:
    text = "b" * 2001
    assert [len(c) for c in split_reply(text)] == [1990, 11]


# -- deliver_reply -------------------------------------------------------------


async def test_deliver_single_reply() -> None:
    msg = _Recorder()
    report = await deliver_reply(msg, "hello")

    assert msg.sent == ["hello"]
    assert report.complete
    assert (report.sent, report.total) == (1, 1)


async def test_deliver_chunks_in_order() -> None:
    text = "".join(str(i % 10) for i in range(5000))
    msg = _Recorder(jitter=True)

    report = await deliver_reply(msg, text)

    assert report.complete
    assert "".join(msg.sent) == text
    assert msg.sent == split_reply(text)


async def test_failed_chunk_stops_delivery() -> None:
    text = "z" * 5000
    msg = _Recorder(fail_on=1)

    report = await deliver_reply(msg, text)

    assert not report.complete
    assert (report.sent, report.total) == (1, 3)
    assert msg.sent == [text[:1990]]


async def test_first_chunk_failure() -> None:
    msg = _Recorder(fail_on=0)
    report = await deliver_reply(msg, "hello")
    assert report.sent == 0
    assert msg.sent == []
