"""
Transaction Input Validation

DESIGN DECISION: Validation collects every failing field instead of
stopping at the first one. The form can then mark all bad fields at once.

Checks run in a fixed order so issues come back in form order:
- description: trimmed text must be non-empty
- amount: must parse as a finite number greater than zero and at most MAX_AMOUNT
- date: must be a date or a zero-padded YYYY-MM-DD string
- kind: must be "income" or "expense"
- category: must be one of the fixed categories

IMPORTANT: Validation NEVER silently fixes values beyond trimming
whitespace and normalizing case on the kind.
"""

import re
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from expense_tracker.models.transaction import (
    Category,
    FieldError,
    TransactionFields,
    TransactionInput,
    TransactionKind,
    ValidationReason,
    ValidationResult,
)


MESSAGES = {
    ValidationReason.MISSING_DESCRIPTION: "Description is required",
    ValidationReason.INVALID_AMOUNT: "Please enter a valid amount greater than 0",
    ValidationReason.MISSING_DATE: "Date is required",
    ValidationReason.INVALID_KIND: "Type is required",
    ValidationReason.MISSING_CATEGORY: "Category is required",
}

ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

# Largest accepted amount: one trillion dollars
MAX_AMOUNT = Decimal("1000000000000")


def parse_amount(raw: Any) -> Optional[Decimal]:
    """Parse a user-entered amount; None if it is not a finite number."""
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float, str)):
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not value.is_finite():
        return None
    return value


def parse_date(raw: Any) -> Optional[date]:
    """Parse a calendar date; None if missing or malformed."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str) and ISO_DATE_PATTERN.fullmatch(raw.strip()):
        try:
            return date.fromisoformat(raw.strip())
        except ValueError:
            return None
    return None


def parse_kind(raw: Any) -> Optional[TransactionKind]:
    if isinstance(raw, TransactionKind):
        return raw
    if isinstance(raw, str):
        try:
            return TransactionKind(raw.strip().lower())
        except ValueError:
            return None
    return None


def parse_category(raw: Any) -> Optional[Category]:
    if isinstance(raw, Category):
        return raw
    if isinstance(raw, str):
        try:
            return Category(raw.strip())
        except ValueError:
            return None
    return None


class TransactionValidator:
    """
    Validates raw transaction input.

    Stateless; one instance can be shared by every ledger.
    """

    def _issue(self, field: str, reason: ValidationReason) -> FieldError:
        return FieldError(field=field, reason=reason, message=MESSAGES[reason])

    def validate(
        self,
        candidate: Union[TransactionInput, Mapping[str, Any]],
    ) -> ValidationResult:
        """
        Validate candidate fields.

        Args:
            candidate: A TransactionInput, or a mapping with the same keys
                       ("type" is accepted for "kind")

        Returns:
            ValidationResult with either the cleaned fields or every issue
        """
        if not isinstance(candidate, TransactionInput):
            candidate = TransactionInput.model_validate(dict(candidate))

        issues = []

        description = "" if candidate.description is None else str(candidate.description).strip()
        if not description:
            issues.append(self._issue("description", ValidationReason.MISSING_DESCRIPTION))

        amount = parse_amount(candidate.amount)
        if amount is None or not 0 < amount <= MAX_AMOUNT:
            issues.append(self._issue("amount", ValidationReason.INVALID_AMOUNT))

        txn_date = parse_date(candidate.date)
        if txn_date is None:
            issues.append(self._issue("date", ValidationReason.MISSING_DATE))

        kind = parse_kind(candidate.kind)
        if kind is None:
            issues.append(self._issue("kind", ValidationReason.INVALID_KIND))

        category = parse_category(candidate.category)
        if category is None:
            issues.append(self._issue("category", ValidationReason.MISSING_CATEGORY))

        if issues:
            return ValidationResult(issues=issues)

        return ValidationResult(
            fields=TransactionFields(
                description=description,
                amount=amount,
                date=txn_date,
                kind=kind,
                category=category,
            )
        )
