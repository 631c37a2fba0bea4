"""Tests for transaction input validation."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from expense_tracker.models import (
    Category,
    TransactionInput,
    TransactionKind,
    ValidationReason,
)
from expense_tracker.validation import (
    MAX_AMOUNT,
    MESSAGES,
    TransactionValidator,
    parse_amount,
    parse_date,
)


@pytest.fixture
def validator():
    return TransactionValidator()


class TestParsers:

    @pytest.mark.parametrize("raw, expected", [
        ("12.50", Decimal("12.50")),
        (" 7 ", Decimal("7")),
        (3, Decimal("3")),
        (0.5, Decimal("0.5")),
        (Decimal("1.01"), Decimal("1.01")),
        ("-2", Decimal("-2")),
    ])
    def test_parse_amount(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "  ", "abc", "NaN", "Infinity", True, [1]])
    def test_parse_amount_rejects(self, raw):
        assert parse_amount(raw) is None

    def test_parse_date(self):
        assert parse_date("2024-01-05") == date(2024, 1, 5)
        assert parse_date(date(2024, 1, 5)) == date(2024, 1, 5)
        assert parse_date(datetime(2024, 1, 5, 13, 30)) == date(2024, 1, 5)

    @pytest.mark.parametrize("raw", [
        None,
        "",
        "2024-13-01",
        "01/05/2024",
        20240105,
        "2024-1-5",
        "2024-01-5",
        "20240105",
        "2024-01-05T00:00",
    ])
    def test_parse_date_rejects(self, raw):
        assert parse_date(raw) is None


class TestTransactionValidator:
    """Tests for TransactionValidator.validate."""

    def test_valid_input(self, validator, make_candidate):
        result = validator.validate(make_candidate(description="  Lunch  ", kind="EXPENSE"))

        assert result.is_valid
        assert result.fields.description == "Lunch"
        assert result.fields.amount == Decimal("42.50")
        assert result.fields.kind == TransactionKind.EXPENSE
        assert result.fields.category == Category.FOOD_AND_DINING

    def test_empty_input_reports_all_fields_in_order(self, validator):
        """Every failing field is reported, in form order."""
        result = validator.validate({})

        assert not result.is_valid
        assert result.fields is None
        assert result.reasons == [
            ValidationReason.MISSING_DESCRIPTION,
            ValidationReason.INVALID_AMOUNT,
            ValidationReason.MISSING_DATE,
            ValidationReason.INVALID_KIND,
            ValidationReason.MISSING_CATEGORY,
        ]

    def test_messages(self, validator):
        result = validator.validate({})
        assert result.errors_by_field == {
            "description": "Description is required",
            "amount": "Please enter a valid amount greater than 0",
            "date": "Date is required",
            "kind": "Type is required",
            "category": "Category is required",
        }
        assert set(MESSAGES) == set(ValidationReason)

    @pytest.mark.parametrize("amount", ["0", "0.00", "-1", "abc", "", None, "inf"])
    def test_invalid_amounts(self, validator, make_candidate, amount):
        result = validator.validate(make_candidate(amount=amount))
        assert result.reasons == [ValidationReason.INVALID_AMOUNT]

    def test_smallest_positive_amount_is_valid(self, validator, make_candidate):
        assert validator.validate(make_candidate(amount="0.01")).is_valid

    def test_amount_upper_bound(self, validator, make_candidate):
        """MAX_AMOUNT itself is accepted; anything larger is not."""
        assert validator.validate(make_candidate(amount=MAX_AMOUNT)).is_valid

        for amount in ["1000000000000.01", "1e30", 10 ** 27]:
            result = validator.validate(make_candidate(amount=amount))
            assert result.reasons == [ValidationReason.INVALID_AMOUNT]

    def test_whitespace_description(self, validator, make_candidate):
        result = validator.validate(make_candidate(description="   "))
        assert result.reasons == [ValidationReason.MISSING_DESCRIPTION]

    def test_malformed_date(self, validator, make_candidate):
        result = validator.validate(make_candidate(date="2024-02-30"))
        assert result.reasons == [ValidationReason.MISSING_DATE]

    def test_unknown_kind(self, validator, make_candidate):
        result = validator.validate(make_candidate(kind="transfer"))
        assert result.reasons == [ValidationReason.INVALID_KIND]

    def test_category_must_match_exactly(self, validator, make_candidate):
        result = validator.validate(make_candidate(category="food & dining"))
        assert result.reasons == [ValidationReason.MISSING_CATEGORY]

    def test_type_alias_and_enum_values(self, validator, make_candidate):
        """Stored-format 'type' and enum members are both accepted."""
        candidate = make_candidate(category=Category.TRAVEL)
        candidate["type"] = candidate.pop("kind")

        result = validator.validate(candidate)

        assert result.is_valid
        assert result.fields.category == Category.TRAVEL

    def test_accepts_transaction_input(self, validator, make_candidate):
        result = validator.validate(TransactionInput(**make_candidate()))
        assert result.is_valid

