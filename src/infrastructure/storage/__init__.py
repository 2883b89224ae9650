"""Storage infrastructure implementations."""

from src.infrastructure.storage.memory import InMemoryKeyValueStore
from src.infrastructure.storage.sqlite import (
    SQLiteKeyValueStore,
    close_pool,
    get_connection,
    get_kv_store,
    get_pool,
    get_transaction,
)

__all__ = [
    # Stores
    "InMemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "get_kv_store",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
