"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the ledger must conform to these schemas.
"""

from expense_tracker.models.transaction import (
    Category,
    FieldError,
    LedgerListing,
    LedgerSummary,
    Transaction,
    TransactionFields,
    TransactionFilter,
    TransactionInput,
    TransactionKind,
    ValidationReason,
    ValidationResult,
)
from expense_tracker.models.user import StoredCredentials, User
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "Category",
    "FieldError",
    "LedgerListing",
    "LedgerSummary",
    "Transaction",
    "TransactionFields",
    "TransactionFilter",
    "TransactionInput",
    "TransactionKind",
    "ValidationReason",
    "ValidationResult",
    # User models
    "StoredCredentials",
    "User",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
