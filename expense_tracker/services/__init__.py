"""Services package."""

from expense_tracker.services.storage import (
    CorruptDataError,
    CredentialRepository,
    CurrentUserRepository,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    LedgerRepository,
    QuotaExceededError,
    StorageError,
    StorageKeys,
)

__all__ = [
    "CorruptDataError",
    "CredentialRepository",
    "CurrentUserRepository",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "LedgerRepository",
    "QuotaExceededError",
    "StorageError",
    "StorageKeys",
]
