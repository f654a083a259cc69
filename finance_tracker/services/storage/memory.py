"""In-process key-value store, used by tests and the 'memory' backend."""

from typing import Optional

from finance_tracker.services.storage.interface import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dictionary-backed store. Contents are lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._data)

    def move(self, key: str, new_key: str) -> bool:
        if key not in self._data:
            return False
        self._data[new_key] = self._data.pop(key)
        return True
