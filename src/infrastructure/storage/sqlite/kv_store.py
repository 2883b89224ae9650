"""SQLite implementation of the key-value store."""

from datetime import datetime, timezone

import aiosqlite

from src.config import get_logger
from src.core.exceptions import DatabaseError
from src.core.interfaces.storage import IKeyValueStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteKeyValueStore(IKeyValueStore):
    """Stores each key as one row of the kv_entries table."""

    async def get(self, key: str) -> str | None:
        try:
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT value FROM kv_entries WHERE key = ?",
                    (key,),
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("get", str(e)) from e

        return None if row is None else row["value"]

    async def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO kv_entries (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value, now),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("set", str(e)) from e

        logger.debug("kv_set", key=key, size=len(value))

    async def delete(self, key: str) -> None:
        try:
            async with get_transaction() as conn:
                await conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
        except aiosqlite.Error as e:
            raise DatabaseError("delete", str(e)) from e

        logger.debug("kv_delete", key=key)

    async def keys(self, prefix: str = "") -> list[str]:
        # escape LIKE wildcards so '_' in user ids matches literally
        pattern = (
            prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_") + "%"
        )
        try:
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT key FROM kv_entries WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
                    (pattern,),
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DatabaseError("keys", str(e)) from e

        return [row["key"] for row in rows]
