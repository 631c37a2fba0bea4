"""
In-Memory Key-Value Store

Values are kept JSON-encoded, the same way a browser's localStorage keeps
strings. Encoding on every write means:
- callers can never mutate stored state through a shared reference
- non-serializable values fail at write time, not at reload time
- the quota can be checked against the real serialized size
"""

import json
from typing import Any, Optional

from expense_tracker.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
    QuotaExceededError,
    StorageError,
)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """
    Process-local key-value store.

    Used by the test suite and by the "memory" storage backend.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self._data: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def _encode(self, key: str, value: Any) -> str:
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON-serializable: {e}") from e

    def _size_with(self, key: str, encoded: str) -> int:
        size = len(key) + len(encoded)
        for existing_key, existing in self._data.items():
            if existing_key != key:
                size += len(existing_key) + len(existing)
        return size

    def used_bytes(self) -> int:
        """Serialized size of everything stored, counted like localStorage."""
        return sum(len(k) + len(v) for k, v in self._data.items())

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Stored value for {key!r} is not valid JSON: {e}") from e

    def set(self, key: str, value: Any) -> None:
        encoded = self._encode(key, value)

        if self._quota_bytes is not None:
            size = self._size_with(key, encoded)
            if size > self._quota_bytes:
                raise QuotaExceededError(
                    f"Writing {key!r} needs {size} bytes; quota is {self._quota_bytes}"
                )

        self._data[key] = encoded

    def remove(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)
