"""
Display formatting.

Amounts are rounded to cents here and only here; the ledger itself keeps
exact values.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional, Union

from expense_tracker.models.transaction import (
    LedgerListing,
    Transaction,
    TransactionKind,
)
from expense_tracker.validation import parse_date


CENT = Decimal("0.01")

Number = Union[Decimal, int, float]


def format_currency(amount: Number) -> str:
    """US dollars with cents and thousands separators: -$1,234.50"""
    value = Decimal(str(amount))
    with localcontext() as ctx:
        # Enough digits for every whole-dollar digit plus cents
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        value = value.quantize(CENT, rounding=ROUND_HALF_UP)
        sign = "-" if value < 0 else ""
        return f"{sign}${abs(value):,.2f}"


def format_signed_amount(transaction: Transaction) -> str:
    """+$10.00 for income, -$10.00 for expenses."""
    sign = "+" if transaction.kind == TransactionKind.INCOME else "-"
    return f"{sign}{format_currency(transaction.amount)}"


def format_date(value: Union[date, str]) -> str:
    """Abbreviated month, day, year: Jan 5, 2024"""
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Not a calendar date: {value!r}")
    return f"{parsed:%b} {parsed.day}, {parsed:%Y}"


def describe_listing(listing: LedgerListing) -> str:
    return f"{listing.match_count} of {listing.total_count} transactions"


def empty_listing_message(listing: LedgerListing) -> Optional[str]:
    """What to show instead of rows, or None if there are rows."""
    if listing.match_count:
        return None
    if listing.total_count == 0:
        return "No transactions yet. Add your first transaction above!"
    return "No transactions match your filters."


def _kind_label(kind: TransactionKind) -> str:
    return "Income" if kind == TransactionKind.INCOME else "Expense"


def added_message(transaction: Transaction) -> str:
    return f"{_kind_label(transaction.kind)} added successfully!"


def updated_message() -> str:
    return "Transaction updated successfully!"


def deleted_message(transaction: Optional[Transaction]) -> str:
    kind = transaction.kind if transaction else TransactionKind.EXPENSE
    return f"{_kind_label(kind)} deleted successfully!"
