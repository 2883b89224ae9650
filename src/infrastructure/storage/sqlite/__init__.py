"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.kv_store import SQLiteKeyValueStore

# Singleton instance
_kv_store: SQLiteKeyValueStore | None = None


async def get_kv_store() -> SQLiteKeyValueStore:
    """Get singleton key-value store instance."""
    global _kv_store
    if _kv_store is None:
        _kv_store = SQLiteKeyValueStore()
    return _kv_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store
    "SQLiteKeyValueStore",
    "get_kv_store",
]
