"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of every ledger mutation
2. Debugging capability
3. A sign-in history

The audit logger:
- Is synchronous, like everything else in the ledger
- Gracefully handles failures (doesn't crash the app if logging fails)
- Never sees passwords
"""

import logging
import sys
from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    Called once at startup by create_app_components; safe to call again
    (the last call wins).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Writes every event to the structured local log. Keeps the most
    recent events in memory so the UI can show an activity feed.
    """

    def __init__(self, history_size: int = 100):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
                          0 disables the history.
        """
        self._logger = structlog.get_logger("expense_tracker.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._history))

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the log write failed. Never raises.
        """
        if self._history_size:
            self._history.append(event)
            del self._history[:-self._history_size]

        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (OSError, ValueError, TypeError) as e:
            # Logging must not break the main flow
            sys.stderr.write(f"WARNING: Failed to write audit event: {e}\n")
            return False

        return True

    def log_transaction_created(self, username: str, details: dict) -> None:
        self.log(AuditEventBuilder.transaction_created(username, details))

    def log_transaction_updated(self, username: str, details: dict) -> None:
        self.log(AuditEventBuilder.transaction_updated(username, details))

    def log_transaction_deleted(self, username: str, details: dict) -> None:
        self.log(AuditEventBuilder.transaction_deleted(username, details))

    def log_validation_failed(
        self,
        username: str,
        operation: str,
        issues: list[dict],
        transaction_id: Optional[str] = None,
    ) -> None:
        """Log rejected create/update input."""
        self.log(AuditEventBuilder.validation_failed(
            username=username,
            operation=operation,
            issues=issues,
            transaction_id=transaction_id,
        ))

    def log_persistence_failed(
        self,
        username: str,
        operation: str,
        error_message: str,
    ) -> None:
        """Log a storage write that did not go through."""
        self.log(AuditEventBuilder.persistence_failed(
            username=username,
            operation=operation,
            error_message=error_message,
        ))

    def log_ledger_loaded(self, username: str, transaction_count: int) -> None:
        self.log(AuditEventBuilder.ledger_loaded(username, transaction_count))

    def log_ledger_unloaded(self, username: str) -> None:
        self.log(AuditEventBuilder.ledger_unloaded(username))

    def log_user_registered(self, username: str) -> None:
        self.log(AuditEventBuilder.user_registered(username))

    def log_user_signed_in(self, username: str) -> None:
        self.log(AuditEventBuilder.user_signed_in(username))

    def log_sign_in_failed(self, username: str) -> None:
        self.log(AuditEventBuilder.sign_in_failed(username))

    def log_user_signed_out(self, username: str) -> None:
        self.log(AuditEventBuilder.user_signed_out(username))
