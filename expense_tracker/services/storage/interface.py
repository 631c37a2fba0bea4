"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the JSON file for another key-value backend later
2. Use in-memory storage for testing
3. Keep ledger logic decoupled from storage implementation

The interface mirrors a browser's localStorage: string keys, JSON
values, synchronous get/set/remove. Nothing more.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from expense_tracker.errors import ExpenseTrackerError


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for key-value blob storage.

    Values are JSON-compatible Python objects (dicts, lists, strings,
    numbers, booleans, None).
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored value, or None if the key is absent

        Raises:
            CorruptDataError: If the stored blob cannot be decoded
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: JSON-compatible value

        Raises:
            QuotaExceededError: If the store would grow past its quota
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> bool:
        """
        Delete a key.

        Args:
            key: Storage key

        Returns:
            True if the key existed
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """
        List all stored keys.

        Returns:
            Keys in insertion order
        """
        pass


class StorageError(ExpenseTrackerError):
    """Base exception for storage operations."""
    pass


class QuotaExceededError(StorageError):
    """The write would exceed the configured storage quota."""
    pass


class CorruptDataError(StorageError):
    """A stored value could not be decoded into the expected shape."""
    pass
