"""Input validation package."""

from expense_tracker.validation.validator import (
    MAX_AMOUNT,
    MESSAGES,
    TransactionValidator,
    parse_amount,
    parse_category,
    parse_date,
    parse_kind,
)

__all__ = [
    "MAX_AMOUNT",
    "MESSAGES",
    "TransactionValidator",
    "parse_amount",
    "parse_category",
    "parse_date",
    "parse_kind",
]
