"""
Storage Services Package

Provides the abstract key-value interface, its backends, and the typed
repositories the ledger and session use.
"""

from expense_tracker.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
    QuotaExceededError,
    StorageError,
)
from expense_tracker.services.storage.memory import InMemoryKeyValueStore
from expense_tracker.services.storage.json_file import JsonFileKeyValueStore
from expense_tracker.services.storage.repositories import (
    CredentialRepository,
    CurrentUserRepository,
    LedgerRepository,
    StorageKeys,
)

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "CorruptDataError",
    "QuotaExceededError",
    "StorageError",
    # Backends
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Repositories
    "CredentialRepository",
    "CurrentUserRepository",
    "LedgerRepository",
    "StorageKeys",
]
