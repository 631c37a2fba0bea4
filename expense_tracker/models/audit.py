"""
Audit Models for Expense Tracker

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every ledger mutation
2. Debugging information when things go wrong
3. A record of sign-in activity

DESIGN DECISION: Audit events describe what happened, never credentials.
Passwords are not accepted by any builder.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger mutations
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    VALIDATION_FAILED = "validation_failed"
    PERSISTENCE_FAILED = "persistence_failed"

    # Ledger lifecycle
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_UNLOADED = "ledger_unloaded"

    # Session
    USER_REGISTERED = "user_registered"
    USER_SIGNED_IN = "user_signed_in"
    SIGN_IN_FAILED = "sign_in_failed"
    USER_SIGNED_OUT = "user_signed_out"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Whose ledger/session this is about
    username: Optional[str] = None

    # Which entity, if any
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'ledger')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "username": self.username,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_created(username, txn)
        event = AuditEventBuilder.sign_in_failed(username)
    """

    @staticmethod
    def transaction_created(username: str, details: dict) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            username=username,
            entity_type="transaction",
            entity_id=details.get("transaction_id"),
            description=f"{details.get('kind', 'transaction').capitalize()} added",
            details=details,
        )

    @staticmethod
    def transaction_updated(username: str, details: dict) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            username=username,
            entity_type="transaction",
            entity_id=details.get("transaction_id"),
            description="Transaction updated",
            details=details,
        )

    @staticmethod
    def transaction_deleted(username: str, details: dict) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            username=username,
            entity_type="transaction",
            entity_id=details.get("transaction_id"),
            description=f"{details.get('kind', 'transaction').capitalize()} deleted",
            details=details,
        )

    @staticmethod
    def validation_failed(
        username: str,
        operation: str,
        issues: list[dict],
        transaction_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            username=username,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"{operation.capitalize()} rejected with {len(issues)} field errors",
            details={
                "operation": operation,
                "issues": issues,
            },
        )

    @staticmethod
    def persistence_failed(
        username: str,
        operation: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            username=username,
            entity_type="ledger",
            description=f"Could not persist ledger after {operation}",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def ledger_loaded(username: str, transaction_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            severity=AuditSeverity.DEBUG,
            username=username,
            entity_type="ledger",
            description=f"Ledger loaded with {transaction_count} transactions",
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def ledger_unloaded(username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_UNLOADED,
            severity=AuditSeverity.DEBUG,
            username=username,
            entity_type="ledger",
            description="Ledger unloaded",
        )

    @staticmethod
    def user_registered(username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            username=username,
            entity_type="user",
            entity_id=username,
            description=f"Account created: {username}",
        )

    @staticmethod
    def user_signed_in(username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SIGNED_IN,
            username=username,
            entity_type="user",
            entity_id=username,
            description=f"Signed in: {username}",
        )

    @staticmethod
    def sign_in_failed(username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGN_IN_FAILED,
            severity=AuditSeverity.WARNING,
            username=username or None,
            entity_type="user",
            description="Sign-in rejected",
        )

    @staticmethod
    def user_signed_out(username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SIGNED_OUT,
            username=username,
            entity_type="user",
            entity_id=username,
            description=f"Signed out: {username}",
        )
