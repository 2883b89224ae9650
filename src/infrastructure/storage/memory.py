"""In-process key-value store for tests and throwaway sessions."""

from src.core.interfaces.storage import IKeyValueStore


class InMemoryKeyValueStore(IKeyValueStore):
    """Dict-backed store. Contents are lost with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))
