"""
Ledger Queries

DESIGN DECISION: Everything that only reads the ledger is a pure function
over a list of transactions. The engine passes its records in; nothing here
touches storage or mutates its input.
"""

from decimal import Decimal
from typing import Iterable, Optional

from expense_tracker.models.transaction import (
    Category,
    LedgerListing,
    LedgerSummary,
    Transaction,
    TransactionFilter,
    TransactionKind,
)


def matches_filter(transaction: Transaction, flt: TransactionFilter) -> bool:
    """True if the transaction satisfies every active predicate."""
    if flt.start_date and transaction.date < flt.start_date:
        return False
    if flt.end_date and transaction.date > flt.end_date:
        return False
    if flt.min_amount is not None and transaction.amount < flt.min_amount:
        return False
    if flt.max_amount is not None and transaction.amount > flt.max_amount:
        return False
    if flt.kind and transaction.kind != flt.kind:
        return False
    if flt.category and transaction.category != flt.category:
        return False
    return True


def sort_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort by date descending. Same-day records keep their ledger order."""
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def list_transactions(
    transactions: list[Transaction],
    flt: Optional[TransactionFilter] = None,
) -> LedgerListing:
    """Filter, sort, and count."""
    flt = flt or TransactionFilter()
    matches = sort_newest_first(t for t in transactions if matches_filter(t, flt))

    return LedgerListing(
        transactions=matches,
        match_count=len(matches),
        total_count=len(transactions),
    )


def summarize(transactions: list[Transaction]) -> LedgerSummary:
    """Income, expense and balance totals over the whole ledger."""
    total_income = Decimal("0")
    total_expenses = Decimal("0")

    for transaction in transactions:
        if transaction.kind == TransactionKind.INCOME:
            total_income += transaction.amount
        else:
            total_expenses += transaction.amount

    return LedgerSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        transaction_count=len(transactions),
    )


def category_breakdown(
    transactions: list[Transaction],
    kind: Optional[TransactionKind] = None,
) -> dict[Category, Decimal]:
    """
    Total amount per category, largest first.

    Args:
        transactions: Records to group
        kind: Restrict to income or expenses; None groups both
    """
    groups: dict[Category, Decimal] = {}

    for transaction in transactions:
        if kind and transaction.kind != kind:
            continue
        groups[transaction.category] = (
            groups.get(transaction.category, Decimal("0")) + transaction.amount
        )

    return dict(sorted(groups.items(), key=lambda item: item[1], reverse=True))


def categories_in_use(transactions: list[Transaction]) -> list[Category]:
    """Distinct categories present, in first-seen order."""
    seen: dict[Category, None] = {}
    for transaction in transactions:
        seen.setdefault(transaction.category, None)
    return list(seen)
