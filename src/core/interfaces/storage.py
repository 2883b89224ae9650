"""
Abstract interfaces for storage.

The application keeps its state as whole JSON documents under string
keys; any durable key-value store that implements IKeyValueStore will do.
"""

from abc import ABC, abstractmethod


class IKeyValueStore(ABC):
    """
    Abstract interface for a string key-value store.

    Implementations: SQLiteKeyValueStore, InMemoryKeyValueStore
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the raw value stored under key, or None if absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
        pass

    @abstractmethod
    async def keys(self, prefix: str = "") -> list[str]:
        """List stored keys starting with prefix."""
        pass
