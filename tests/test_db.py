"""Tests for async database connection abstraction and schema bootstrap."""

from pathlib import Path

import pytest

from src.db import SqlStore, _AsyncConnection, ensure_schema, get_connection

pytestmark = pytest.mark.usefixtures("_no_turso")


class TestGetConnection:
    async def test_returns_async_connection(self, tmp_path: Path):
        conn = await get_connection(local_path_override=tmp_path / "test.db")
        assert isinstance(conn, _AsyncConnection)
        await conn.close()

    async def test_creates_parent_dirs(self, tmp_path: Path):
        db_path = tmp_path / "nested" / "dir" / "test.db"
        conn = await get_connection(local_path_override=db_path)
        assert db_path.parent.exists()
        await conn.close()


class TestAsyncConnection:
    async def test_execute_and_fetchall(self, tmp_path: Path):
        conn = await get_connection(local_path_override=tmp_path / "test.db")
        await conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
        await conn.execute("INSERT INTO t (name) VALUES (?)", ("alice",))
        await conn.commit()

        cursor = await conn.execute("SELECT name FROM t")
        rows = await cursor.fetchall()
        assert rows == [("alice",)]
        await conn.close()

    async def test_fetchone_returns_none_when_empty(self, tmp_path: Path):
        conn = await get_connection(local_path_override=tmp_path / "test.db")
        await conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY)")

        cursor = await conn.execute("SELECT * FROM t WHERE id = 999")
        row = await cursor.fetchone()
        assert row is None
        await conn.close()

    async def test_last_insert_id(self, tmp_path: Path):
        conn = await get_connection(local_path_override=tmp_path / "test.db")
        await conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
        await conn.execute("INSERT INTO t (name) VALUES (?)", ("a",))
        first = await conn.last_insert_id()
        await conn.execute("INSERT INTO t (name) VALUES (?)", ("b",))
        second = await conn.last_insert_id()
        await conn.commit()

        assert second == first + 1
        await conn.close()

    async def test_rowcount(self, tmp_path: Path):
        conn = await get_connection(local_path_override=tmp_path / "test.db")
        await conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
        await conn.execute("INSERT INTO t (name) VALUES (?)", ("a",))
        await conn.execute("INSERT INTO t (name) VALUES (?)", ("b",))
        await conn.commit()

        cursor = await conn.execute("DELETE FROM t")
        assert cursor.rowcount == 2
        await conn.close()


class TestEnsureSchema:
    async def test_creates_tables_and_singletons(self, tmp_path: Path):
        conn = await get_connection(local_path_override=tmp_path / "test.db")
        await ensure_schema(conn)

        cursor = await conn.execute("SELECT id, summary FROM memory")
        assert await cursor.fetchall() == [(1, "")]
        cursor = await conn.execute("SELECT id, content FROM instructions")
        assert await cursor.fetchall() == [(1, "")]
        cursor = await conn.execute("SELECT COUNT(*) FROM allowlist")
        assert (await cursor.fetchone())[0] == 0
        cursor = await conn.execute("SELECT COUNT(*) FROM knowledge_files")
        assert (await cursor.fetchone())[0] == 0
        await conn.close()

    async def test_idempotent(self, tmp_path: Path):
        conn = await get_connection(local_path_override=tmp_path / "test.db")
        await ensure_schema(conn)
        await conn.execute("UPDATE memory SET summary = 'kept' WHERE id = 1")
        await conn.commit()
        await ensure_schema(conn)

        cursor = await conn.execute("SELECT summary FROM memory")
        assert await cursor.fetchall() == [("kept",)]
        await conn.close()


class TestSqlStoreSingleton:
    def test_each_subclass_has_its_own_instance(self):
        class StoreA(SqlStore):
            pass

        class StoreB(SqlStore):
            pass

        a = StoreA.get()
        b = StoreB.get()
        assert a is StoreA.get()
        assert b is StoreB.get()
        assert a is not b
        assert isinstance(b, StoreB)

        StoreA._reset()
        assert StoreA.get() is not a
