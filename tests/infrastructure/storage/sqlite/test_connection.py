"""Unit tests for SQLite connection pool."""

import asyncio
from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

import src.infrastructure.storage.sqlite.connection as conn_module
from src.config.settings import StorageSettings
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)


class TestConnectionPoolInit:
    """Tests for ConnectionPool initialization."""

    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool._initialized is False
        assert pool._connections == []

    def test_custom_values(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=10, busy_timeout=60000)
        assert pool.pool_size == 10
        assert pool.busy_timeout == 60000

    def test_from_settings(self, tmp_path: Path):
        storage = StorageSettings(data_dir=tmp_path, db_name="shop.db", pool_size=3)
        pool = ConnectionPool.from_settings(storage)
        assert pool.db_path == tmp_path / "shop.db"
        assert pool.pool_size == 3


class TestConnectionPoolInitialize:
    """Tests for ConnectionPool.initialize()."""

    async def test_creates_directory(self, tmp_path: Path):
        """Initialize creates database directory if not exists."""
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        pool = ConnectionPool(db_path, pool_size=1)

        await pool.initialize()
        assert db_path.parent.exists()
        await pool.close()

    async def test_creates_connections(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=3)
        await pool.initialize()

        assert len(pool._connections) == 3
        assert pool._pool.qsize() == 3
        await pool.close()

    async def test_idempotent(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()
        await pool.initialize()

        assert len(pool._connections) == 2
        await pool.close()

    async def test_wal_mode_and_row_factory(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA journal_mode")
            row = await cursor.fetchone()
            assert row[0] == "wal"
            assert conn.row_factory is aiosqlite.Row
        await pool.close()


class TestConnectionPoolAcquire:
    """Tests for ConnectionPool.acquire() and transaction()."""

    async def test_acquire_returns_connection_to_pool(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()

        async with pool.acquire():
            assert pool._pool.qsize() == 1
        assert pool._pool.qsize() == 2
        await pool.close()

    async def test_acquire_waits_when_exhausted(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()

        async with pool.acquire():
            waiter = asyncio.create_task(pool._pool.get())
            await asyncio.sleep(0.01)
            assert not waiter.done()
        await asyncio.wait_for(waiter, timeout=1)
        await pool._pool.put(waiter.result())
        await pool.close()

    async def test_transaction_commits(self, initialized_db: Path):
        pool = ConnectionPool(initialized_db, pool_size=1)

        async with pool.transaction() as conn:
            await conn.execute(
                "INSERT INTO kv_entries (key, value) VALUES (?, ?)", ("k", "v")
            )
        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT value FROM kv_entries WHERE key = 'k'")
            row = await cursor.fetchone()
        assert row["value"] == "v"
        await pool.close()

    async def test_transaction_rolls_back_on_error(self, initialized_db: Path):
        pool = ConnectionPool(initialized_db, pool_size=1)

        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute(
                    "INSERT INTO kv_entries (key, value) VALUES (?, ?)", ("k", "v")
                )
                raise RuntimeError("boom")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM kv_entries")
            row = await cursor.fetchone()
        assert row[0] == 0
        await pool.close()

    async def test_writes_are_serialized(self, initialized_db: Path):
        pool = ConnectionPool(initialized_db, pool_size=2)
        order: list[str] = []

        async def write(name: str) -> None:
            async with pool.transaction() as conn:
                order.append(f"{name}-start")
                await conn.execute(
                    "INSERT INTO kv_entries (key, value) VALUES (?, ?)", (name, "v")
                )
                await asyncio.sleep(0.01)
                order.append(f"{name}-end")

        await asyncio.gather(write("a"), write("b"))

        assert order == ["a-start", "a-end", "b-start", "b-end"]
        await pool.close()

    async def test_ping(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        assert await pool.ping() >= 0
        await pool.close()

    async def test_close_is_idempotent(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.close()
        await pool.initialize()
        await pool.close()
        await pool.close()
        assert pool._initialized is False

    async def test_close_resets_pool(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()
        await pool.close()

        assert pool._initialized is False
        assert pool._connections == []
        assert pool._pool.qsize() == 0


class TestGlobalPool:
    """Tests for the module-level pool helpers."""

    async def test_get_pool_is_singleton(self, mock_settings):
        conn_module._pool = None
        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            first = await get_pool()
            second = await get_pool()
            assert first is second
            assert first.pool_size == 2
            await close_pool()
        assert conn_module._pool is None

    async def test_get_connection_and_transaction(self, initialized_db: Path, mock_settings):
        conn_module._pool = None
        mock_settings.storage.db_path = initialized_db
        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            async with get_transaction() as conn:
                await conn.execute(
                    "INSERT INTO kv_entries (key, value) VALUES (?, ?)", ("a", "1")
                )
            async with get_connection() as conn:
                cursor = await conn.execute("SELECT value FROM kv_entries WHERE key = 'a'")
                row = await cursor.fetchone()
            assert row["value"] == "1"
            await close_pool()

    async def test_close_pool_without_pool(self):
        conn_module._pool = None
        await close_pool()
        assert conn_module._pool is None
