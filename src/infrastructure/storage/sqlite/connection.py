"""
Async SQLite connection pool with aiosqlite.

Reads share a small queue of connections. Writes replace whole JSON
collections, so they go through one in-process write lock and start
with BEGIN IMMEDIATE; two saves never interleave on the same database.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings
from src.config.settings import StorageSettings

logger = get_logger(__name__)


class ConnectionPool:
    """Queue of open aiosqlite connections to one database file."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, storage: StorageSettings) -> "ConnectionPool":
        return cls(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
        )

    async def initialize(self) -> None:
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.pool_size):
                conn = await self._open()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _open(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        # readers keep working while a collection is rewritten
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection for reads.

        Usage:
            async with pool.acquire() as conn:
                cursor = await conn.execute(...)
        """
        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection for one serialized write; commit or roll back."""
        async with self._write_lock, self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def ping(self) -> float:
        """Round-trip a trivial query; returns latency in milliseconds."""
        start = time.perf_counter()
        async with self.acquire() as conn:
            await conn.execute("SELECT 1")
        return (time.perf_counter() - start) * 1000

    async def close(self) -> None:
        async with self._lock:
            if not self._initialized and not self._connections:
                return
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._pool = asyncio.Queue(maxsize=self.pool_size)
            self._initialized = False
            logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """The process-wide pool, opened on first use."""
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_settings(get_settings().storage)
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
