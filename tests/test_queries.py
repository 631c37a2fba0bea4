"""Tests for the pure ledger query functions."""

from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.ledger.queries import (
    categories_in_use,
    category_breakdown,
    list_transactions,
    matches_filter,
    sort_newest_first,
    summarize,
)
from expense_tracker.models import (
    Category,
    Transaction,
    TransactionFilter,
    TransactionKind,
)


def _txn(txn_id, amount, day, kind="expense", category="Food & Dining"):
    return Transaction(
        id=txn_id,
        description=f"txn {txn_id}",
        amount=Decimal(amount),
        date=date(2024, 1, day),
        kind=kind,
        category=category,
    )


@pytest.fixture
def ledger():
    return [
        _txn("a", "100", 5),
        _txn("b", "500", 10, kind="income", category="Business"),
        _txn("c", "20", 10, category="Transportation"),
        _txn("d", "60", 1, category="Food & Dining"),
    ]


class TestFiltering:

    def test_empty_filter_matches_everything(self, ledger):
        flt = TransactionFilter()
        assert all(matches_filter(t, flt) for t in ledger)

    def test_date_bounds_are_inclusive(self, ledger):
        flt = TransactionFilter(start_date=date(2024, 1, 5), end_date=date(2024, 1, 5))
        assert [t.id for t in ledger if matches_filter(t, flt)] == ["a"]

    def test_amount_bounds_are_inclusive(self, ledger):
        flt = TransactionFilter(min_amount=Decimal("60"), max_amount=Decimal("100"))
        assert [t.id for t in ledger if matches_filter(t, flt)] == ["a", "d"]

    def test_predicates_are_anded(self, ledger):
        flt = TransactionFilter(kind=TransactionKind.EXPENSE, category=Category.FOOD_AND_DINING)
        assert [t.id for t in ledger if matches_filter(t, flt)] == ["a", "d"]

    def test_inverted_range_matches_nothing(self, ledger):
        flt = TransactionFilter(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))
        assert list_transactions(ledger, flt).match_count == 0


class TestListing:

    def test_newest_first_with_stable_ties(self, ledger):
        """Same-day records keep ledger order."""
        assert [t.id for t in sort_newest_first(ledger)] == ["b", "c", "a", "d"]

    def test_counts(self, ledger):
        listing = list_transactions(ledger, TransactionFilter(kind=TransactionKind.INCOME))
        assert listing.match_count == 1
        assert listing.total_count == 4
        assert listing.is_filtered

    def test_input_not_mutated(self, ledger):
        before = list(ledger)
        list_transactions(ledger)
        assert ledger == before


class TestAggregates:

    def test_summarize(self, ledger):
        summary = summarize(ledger)
        assert summary.total_income == Decimal("500")
        assert summary.total_expenses == Decimal("180")
        assert summary.balance == Decimal("320")
        assert summary.transaction_count == 4

    def test_summarize_empty(self):
        summary = summarize([])
        assert summary.balance == Decimal("0")
        assert summary.transaction_count == 0

    def test_decimal_sums_are_exact(self):
        txns = [_txn(str(i), "0.10", 1, kind="income") for i in range(3)]
        assert summarize(txns).total_income == Decimal("0.30")

    def test_category_breakdown_largest_first(self, ledger):
        breakdown = category_breakdown(ledger, TransactionKind.EXPENSE)
        assert list(breakdown.items()) == [
            (Category.FOOD_AND_DINING, Decimal("160")),
            (Category.TRANSPORTATION, Decimal("20")),
        ]

    def test_category_breakdown_all_kinds(self, ledger):
        breakdown = category_breakdown(ledger)
        assert breakdown[Category.BUSINESS] == Decimal("500")
        assert next(iter(breakdown)) == Category.BUSINESS

    def test_categories_in_use_first_seen(self, ledger):
        assert categories_in_use(ledger) == [
            Category.FOOD_AND_DINING,
            Category.BUSINESS,
            Category.TRANSPORTATION,
        ]
