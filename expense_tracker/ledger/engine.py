"""
Ledger Engine

The ledger engine owns one signed-in user's transactions.

GUARANTEES:
- Every record in memory passed validation
- Ids are unique within the ledger and never change
- Every mutation is persisted before it is reported as done
- A failed write leaves memory exactly as it was before the call

The engine has two states: unloaded (nobody signed in) and loaded for one
user. Ledger operations while unloaded raise LedgerNotLoadedError.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Callable, Optional, Union
from uuid import uuid4

from expense_tracker.audit import AuditLogger
from expense_tracker.errors import ExpenseTrackerError
from expense_tracker.ledger import queries
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
)
from expense_tracker.services.storage import LedgerRepository, StorageError
from expense_tracker.validation import TransactionValidator


CandidateInput = Union[TransactionInput, Mapping[str, Any]]
FilterInput = Union[TransactionFilter, Mapping[str, Any], None]


class LedgerError(ExpenseTrackerError):
    """Base exception for ledger operations."""
    pass


class LedgerNotLoadedError(LedgerError):
    """No user is signed in, so there is no ledger to operate on."""
    pass


class LedgerValidationError(LedgerError):
    """Candidate fields were rejected. Carries every field error."""

    def __init__(self, issues: list[FieldError]):
        self.issues = issues
        fields = ", ".join(issue.field for issue in issues)
        super().__init__(f"Invalid transaction fields: {fields}")

    @property
    def errors_by_field(self) -> dict[str, str]:
        return {issue.field: issue.message for issue in self.issues}


class TransactionNotFoundError(LedgerError):
    """No transaction with the given id exists in the ledger."""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class PersistenceError(LedgerError):
    """The ledger could not be written to storage."""

    USER_MESSAGE = "Could not save your changes. Please try again."


def generate_transaction_id() -> str:
    """Random 128-bit token, hex encoded."""
    return uuid4().hex


class LedgerEngine:
    """
    CRUD, filtering and aggregates over one user's transactions.

    Usage:
        engine = LedgerEngine(LedgerRepository(store))
        engine.load("alice")
        txn = engine.create({"description": "Lunch", "amount": "12.50", ...})
        engine.list({"kind": "expense"})
    """

    def __init__(
        self,
        repository: LedgerRepository,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        id_factory: Callable[[], str] = generate_transaction_id,
    ):
        self._repository = repository
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger
        self._id_factory = id_factory

        self._owner: Optional[str] = None
        self._records: list[Transaction] = []

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def owner(self) -> Optional[str]:
        """Username whose ledger is loaded, or None."""
        return self._owner

    @property
    def is_loaded(self) -> bool:
        return self._owner is not None

    def load(self, username: str, fresh: bool = False) -> int:
        """
        Load a user's persisted ledger, replacing whatever was loaded.

        Args:
            username: Owner of the ledger
            fresh: Discard anything stored for this user first (new accounts)

        Returns the number of transactions loaded (0 for a new user).
        """
        if fresh:
            self._repository.clear(username)
        records = self._repository.load(username)

        self._owner = username
        self._records = records

        if self._audit_logger:
            self._audit_logger.log_ledger_loaded(username, len(records))

        return len(records)

    def unload(self) -> None:
        """Discard the in-memory ledger. It is already persisted."""
        owner = self._owner
        self._owner = None
        self._records = []

        if self._audit_logger and owner:
            self._audit_logger.log_ledger_unloaded(owner)

    def _require_loaded(self) -> str:
        if self._owner is None:
            raise LedgerNotLoadedError("No user is signed in")
        return self._owner

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _index_of(self, transaction_id: str) -> Optional[int]:
        for idx, record in enumerate(self._records):
            if record.id == transaction_id:
                return idx
        return None

    def _new_id(self) -> str:
        existing = {record.id for record in self._records}
        while True:
            candidate = self._id_factory()
            if candidate not in existing:
                return candidate

    def _validated(
        self,
        owner: str,
        candidate: CandidateInput,
        operation: str,
        transaction_id: Optional[str] = None,
    ) -> TransactionFields:
        result = self._validator.validate(candidate)
        if not result.is_valid:
            if self._audit_logger:
                self._audit_logger.log_validation_failed(
                    username=owner,
                    operation=operation,
                    issues=[issue.model_dump(mode="json") for issue in result.issues],
                    transaction_id=transaction_id,
                )
            raise LedgerValidationError(result.issues)
        return result.fields

    def _commit(self, owner: str, operation: str, records: list[Transaction]) -> None:
        """Swap in the new record set and persist it, or roll back."""
        previous = self._records
        self._records = records
        try:
            self._repository.save(owner, records)
        except StorageError as e:
            self._records = previous
            if self._audit_logger:
                self._audit_logger.log_persistence_failed(
                    username=owner,
                    operation=operation,
                    error_message=str(e),
                )
            raise PersistenceError(PersistenceError.USER_MESSAGE) from e

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create(self, candidate: CandidateInput) -> Transaction:
        """
        Validate and append a new transaction.

        Raises:
            LedgerValidationError: Candidate fields were rejected
            PersistenceError: The write failed; nothing changed
        """
        owner = self._require_loaded()
        fields = self._validated(owner, candidate, "create")

        transaction = Transaction.from_fields(self._new_id(), fields)
        self._commit(owner, "create", [*self._records, transaction])

        if self._audit_logger:
            self._audit_logger.log_transaction_created(owner, transaction.to_log_dict())

        return transaction

    def update(self, transaction_id: str, candidate: CandidateInput) -> Transaction:
        """
        Replace every field of an existing transaction, keeping its id.

        Raises:
            TransactionNotFoundError: No such id
            LedgerValidationError: Candidate fields were rejected
            PersistenceError: The write failed; nothing changed
        """
        owner = self._require_loaded()

        idx = self._index_of(transaction_id)
        if idx is None:
            raise TransactionNotFoundError(transaction_id)

        fields = self._validated(owner, candidate, "update", transaction_id)

        transaction = Transaction.from_fields(transaction_id, fields)
        records = list(self._records)
        records[idx] = transaction
        self._commit(owner, "update", records)

        if self._audit_logger:
            self._audit_logger.log_transaction_updated(owner, transaction.to_log_dict())

        return transaction

    def delete(self, transaction_id: str) -> bool:
        """
        Remove a transaction.

        Returns True if it existed. Deleting an unknown id is a no-op that
        returns False, so callers can clear any edit referencing it.

        Raises:
            PersistenceError: The write failed; nothing changed
        """
        owner = self._require_loaded()

        idx = self._index_of(transaction_id)
        if idx is None:
            return False

        removed = self._records[idx]
        records = self._records[:idx] + self._records[idx + 1:]
        self._commit(owner, "delete", records)

        if self._audit_logger:
            self._audit_logger.log_transaction_deleted(owner, removed.to_log_dict())

        return True

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """All records in ledger (insertion) order."""
        self._require_loaded()
        return tuple(self._records)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        self._require_loaded()
        idx = self._index_of(transaction_id)
        return None if idx is None else self._records[idx]

    def aggregate(self) -> LedgerSummary:
        """Totals over the whole, unfiltered ledger."""
        self._require_loaded()
        return queries.summarize(self._records)

    def category_breakdown(
        self,
        kind: Optional[TransactionKind] = None,
    ) -> dict[Category, Decimal]:
        self._require_loaded()
        return queries.category_breakdown(self._records, kind)

    def categories_in_use(self) -> tuple[Category, ...]:
        self._require_loaded()
        return tuple(queries.categories_in_use(self._records))

    def list(self, flt: FilterInput = None) -> LedgerListing:
        """
        Filtered view, newest first, with "N of M" counts.

        Args:
            flt: A TransactionFilter, a mapping of its fields, or None

        Raises:
            pydantic.ValidationError: The mapping has an unknown key or a
                                      value that does not parse
        """
        self._require_loaded()
        if flt is not None and not isinstance(flt, TransactionFilter):
            flt = TransactionFilter.model_validate(dict(flt))
        return queries.list_transactions(self._records, flt)
