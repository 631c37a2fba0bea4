"""
Core Data Models for Expense Tracker

These models define the strict schemas for all data flowing through the ledger.
They are designed to:
1. Enforce the record invariants at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging

DESIGN DECISION: Raw form input and validated records are separate models.
TransactionInput accepts anything a form can produce; only the validator
turns it into TransactionFields, and only the ledger engine turns those
into a Transaction by assigning an id.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """Whether money came in or went out."""
    INCOME = "income"
    EXPENSE = "expense"


class Category(str, Enum):
    """
    Supported transaction categories.

    The values are the display labels; they are also what gets stored.
    """
    FOOD_AND_DINING = "Food & Dining"
    TRANSPORTATION = "Transportation"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    BILLS_AND_UTILITIES = "Bills & Utilities"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    BUSINESS = "Business"
    OTHER = "Other"


class ValidationReason(str, Enum):
    """Why a candidate field was rejected."""
    MISSING_DESCRIPTION = "missing_description"
    INVALID_AMOUNT = "invalid_amount"
    MISSING_DATE = "missing_date"
    INVALID_KIND = "invalid_kind"
    MISSING_CATEGORY = "missing_category"


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class TransactionInput(BaseModel):
    """
    Candidate fields exactly as the rendering layer collected them.

    Nothing here is trusted. Every field is optional and untyped so that
    validation can report every problem at once instead of failing on the
    first type error.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    description: Any = None
    amount: Any = None
    date: Any = None
    kind: Any = Field(
        default=None,
        validation_alias=AliasChoices("kind", "type"),
    )
    category: Any = None


class TransactionFields(BaseModel):
    """
    Validated transaction fields, without identity.

    This is what create and update apply to the ledger.
    """
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    description: str = Field(
        ...,
        min_length=1,
        description="What the money was for"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Positive amount in US dollars"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    kind: TransactionKind = Field(
        ...,
        validation_alias=AliasChoices("kind", "type"),
        description="Income or expense"
    )
    category: Category = Field(
        ...,
        description="Category from the fixed set"
    )


class Transaction(TransactionFields):
    """
    A persisted ledger record.

    CRITICAL: id is assigned once by the ledger engine and never changes.
    Everything else can be replaced by an update.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Unique identifier within the owner's ledger"
    )

    @classmethod
    def from_fields(cls, transaction_id: str, fields: TransactionFields) -> "Transaction":
        return cls(id=transaction_id, **fields.model_dump())

    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME

    def to_log_dict(self) -> dict:
        """Compact representation for structured logs."""
        return {
            "transaction_id": self.id,
            "kind": self.kind.value,
            "category": self.category.value,
            "amount": str(self.amount),
            "date": self.date.isoformat(),
        }


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class FieldError(BaseModel):
    """A single rejected field."""

    field: str = Field(
        ...,
        description="Name of the offending field"
    )
    reason: ValidationReason
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a TransactionInput.

    Exactly one of `fields` (on success) or `issues` (on failure) is
    meaningful.
    """

    fields: Optional[TransactionFields] = None
    issues: list[FieldError] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues and self.fields is not None

    @property
    def errors_by_field(self) -> dict[str, str]:
        """Field name -> message, the shape a form wants."""
        return {issue.field: issue.message for issue in self.issues}

    @property
    def reasons(self) -> list[ValidationReason]:
        return [issue.reason for issue in self.issues]


# =============================================================================
# QUERY MODELS
# =============================================================================

class TransactionFilter(BaseModel):
    """
    Structured listing filter.

    Every field is optional and the active ones are AND-ed:
    - start_date / end_date: inclusive bounds on the transaction date
    - min_amount / max_amount: inclusive bounds on the amount
    - kind: income or expense only; "all" means no restriction
    - category: exact category match

    Blank strings (an untouched form control) count as "not set". Unknown
    keys are rejected; the camelCase names (startDate, minAmount, ...) are
    accepted alongside the field names.
    """

    start_date: Optional[dt.date] = Field(
        default=None,
        validation_alias=AliasChoices("start_date", "startDate"),
    )
    end_date: Optional[dt.date] = Field(
        default=None,
        validation_alias=AliasChoices("end_date", "endDate"),
    )
    min_amount: Optional[Decimal] = Field(
        default=None,
        allow_inf_nan=False,
        validation_alias=AliasChoices("min_amount", "minAmount"),
    )
    max_amount: Optional[Decimal] = Field(
        default=None,
        allow_inf_nan=False,
        validation_alias=AliasChoices("max_amount", "maxAmount"),
    )
    kind: Optional[TransactionKind] = Field(
        default=None,
        validation_alias=AliasChoices("kind", "type"),
    )
    category: Optional[Category] = None

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("kind", mode="before")
    @classmethod
    def all_kinds_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip().lower() == "all":
            return None
        return v

    @property
    def active_count(self) -> int:
        """Number of predicates that actually restrict the listing."""
        return sum(
            1 for value in self.model_dump().values() if value is not None
        )

    @property
    def is_active(self) -> bool:
        return self.active_count > 0


class LedgerListing(BaseModel):
    """Filtered, sorted view of a ledger."""

    transactions: list[Transaction] = Field(default_factory=list)
    match_count: int = Field(ge=0)
    total_count: int = Field(ge=0)

    @property
    def is_filtered(self) -> bool:
        return self.match_count != self.total_count


class LedgerSummary(BaseModel):
    """
    Aggregate totals over the whole ledger.

    Amounts are exact; rounding to cents happens only when displayed.
    """

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    transaction_count: int = Field(default=0, ge=0)

    @property
    def is_positive_balance(self) -> bool:
        return self.balance >= 0
