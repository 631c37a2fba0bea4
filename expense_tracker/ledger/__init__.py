"""Ledger package: the engine and its read-only queries."""

from expense_tracker.ledger.engine import (
    LedgerEngine,
    LedgerError,
    LedgerNotLoadedError,
    LedgerValidationError,
    PersistenceError,
    TransactionNotFoundError,
    generate_transaction_id,
)

__all__ = [
    "LedgerEngine",
    "LedgerError",
    "LedgerNotLoadedError",
    "LedgerValidationError",
    "PersistenceError",
    "TransactionNotFoundError",
    "generate_transaction_id",
]
