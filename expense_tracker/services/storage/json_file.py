"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON file is the default backend because:
1. It behaves like the browser localStorage the app was designed around
2. No database setup required
3. Users can inspect and back up their data by copying one file

TRADEOFFS:
- The whole file is rewritten on every mutation (fine for personal use)
- One writer at a time; there is no file locking

The file maps each key to its JSON-encoded value string, exactly the
shape localStorage exposes.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.services.storage.interface import (
    CorruptDataError,
    StorageError,
)
from expense_tracker.services.storage.memory import InMemoryKeyValueStore


class JsonFileKeyValueStore(InMemoryKeyValueStore):
    """
    Key-value store persisted to a JSON file.

    Reads are served from memory. Every write is flushed to disk before
    returning; if the flush fails, the in-memory change is rolled back so
    memory and disk never disagree.
    """

    def __init__(
        self,
        path: Union[str, Path],
        quota_bytes: Optional[int] = None,
    ):
        super().__init__(quota_bytes=quota_bytes)
        self._path = Path(path)
        self._data = self._read_file()

    @property
    def path(self) -> Path:
        return self._path

    def _read_file(self) -> dict[str, str]:
        """Load the file; a missing file is an empty store."""
        if not self._path.exists():
            return {}

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Storage file {self._path} is not valid JSON: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read storage file {self._path}: {e}") from e

        if not isinstance(raw, dict) or not all(
            isinstance(value, str) for value in raw.values()
        ):
            raise CorruptDataError(
                f"Storage file {self._path} must map keys to encoded strings"
            )

        return raw

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_file(self) -> None:
        """Atomically replace the file with the current contents."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(
            json.dumps(self._data, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        os.replace(tmp_path, self._path)

    def _flush(self, previous: dict[str, str]) -> None:
        try:
            self._write_file()
        except OSError as e:
            self._data = previous
            raise StorageError(f"Failed to write storage file {self._path}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        previous = dict(self._data)
        super().set(key, value)
        self._flush(previous)

    def remove(self, key: str) -> bool:
        if key not in self._data:
            return False
        previous = dict(self._data)
        super().remove(key)
        self._flush(previous)
        return True
