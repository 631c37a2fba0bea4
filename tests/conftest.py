"""Shared fixtures. Everything runs against in-memory storage."""

from typing import Any

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.ledger import LedgerEngine
from expense_tracker.services.storage import (
    InMemoryKeyValueStore,
    LedgerRepository,
    StorageError,
)
from expense_tracker.session import create_app_components


class FlakyStore(InMemoryKeyValueStore):
    """In-memory store whose writes can be switched off."""

    def __init__(self):
        super().__init__()
        self.fail_writes = False

    def set(self, key: str, value: Any) -> None:
        if self.fail_writes:
            raise StorageError("disk full")
        super().set(key, value)


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def flaky_store():
    return FlakyStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def engine(store, audit_logger):
    """A ledger loaded for 'alice'."""
    ledger = LedgerEngine(LedgerRepository(store), audit_logger=audit_logger)
    ledger.load("alice")
    return ledger


@pytest.fixture
def tracker(store):
    """A signed-out session over the in-memory store."""
    return create_app_components(store=store)


@pytest.fixture
def make_candidate():
    """Build valid raw form input, overriding any field."""
    def _make(**overrides):
        candidate = {
            "description": "Groceries",
            "amount": "42.50",
            "date": "2024-01-05",
            "kind": "expense",
            "category": "Food & Dining",
        }
        candidate.update(overrides)
        return candidate
    return _make
