"""Tests for MemoryStore: libsql CRUD on the memory row."""

from pathlib import Path

import pytest

from src.memory.store import MemoryStore

pytestmark = pytest.mark.usefixtures("_no_turso")


@pytest.fixture
def store(db_path: Path) -> MemoryStore:
    return MemoryStore(db_path=db_path)


async def test_read_seeded_row(store: MemoryStore) -> None:
    record = await store.read()
    assert record is not None
    assert record.summary == ""


async def test_write_and_read_back(store: MemoryStore) -> None:
    record = await store.read()
    assert record is not None

    assert await store.write(record.id, "\nUser: hi\nBot: hello") is True

    again = await store.read_by_id(record.id)
    assert again is not None
    assert again.summary == "\nUser: hi\nBot: hello"


async def test_write_unknown_row(store: MemoryStore) -> None:
    assert await store.write(999, "lost") is False


async def test_read_by_id_missing(store: MemoryStore) -> None:
    assert await store.read_by_id(999) is None


async def test_clear(store: MemoryStore) -> None:
    record = await store.read()
    assert record is not None
    await store.write(record.id, "\nUser: hi\nBot: hello")

    assert await store.clear() == 1
    cleared = await store.read()
    assert cleared is not None
    assert cleared.summary == ""
