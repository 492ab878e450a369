"""
Tests for client-side expense validation.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from expense_tracker.models.expense import ExpenseDraft
from expense_tracker.validation import ExpenseValidator


@pytest.fixture
def validator():
    return ExpenseValidator()


class TestValidate:
    """Tests for ExpenseValidator.validate."""

    def test_valid_draft(self, validator):
        draft = ExpenseDraft(title="Dinner", amount=Decimal("500"), category="Food")
        result = validator.validate(draft)
        assert result.is_valid is True
        assert result.issues == []

    def test_missing_title(self, validator):
        """Test that an empty title blocks the request."""
        result = validator.validate(ExpenseDraft(title="", amount=Decimal("10")))
        assert result.has_errors is True
        issue = result.issues[0]
        assert issue.field == "title"
        assert issue.issue_type == "missing"
        assert issue.suggested_fix is not None

    def test_whitespace_title_is_missing(self, validator):
        result = validator.validate(ExpenseDraft(title="   ", amount=Decimal("10")))
        assert [i.field for i in result.issues] == ["title"]

    def test_long_title(self, validator):
        result = validator.validate(ExpenseDraft(title="x" * 201, amount=Decimal("10")))
        assert result.issues[0].issue_type == "invalid_value"

    def test_missing_amount(self, validator):
        result = validator.validate(ExpenseDraft(title="Tea"))
        assert result.error_count == 1
        assert result.issues[0].field == "amount"
        assert result.issues[0].issue_type == "missing"

    def test_negative_amount(self, validator):
        result = validator.validate(ExpenseDraft(title="Refund", amount=Decimal("-5")))
        assert result.issues[0].issue_type == "invalid_value"

    @pytest.mark.parametrize("amount", ["1e400", "1e-400"])
    def test_amount_outside_float_range(self, validator, amount):
        """Test that amounts the JSON body can't carry are rejected."""
        draft, result = validator.parse_form(title="Tea", amount=amount)
        assert result.has_errors is True
        assert result.issues[0].field == "amount"
        assert result.issues[0].issue_type == "invalid_value"

    def test_large_realistic_amount_is_allowed(self, validator):
        result = validator.validate(ExpenseDraft(title="Car", amount=Decimal("2500000.75")))
        assert result.is_valid is True

    def test_zero_amount_is_allowed(self, validator):
        result = validator.validate(ExpenseDraft(title="Free sample", amount=Decimal("0")))
        assert result.is_valid is True

    def test_long_description(self, validator):
        draft = ExpenseDraft(title="Tea", amount=Decimal("10"), description="x" * 1001)
        result = validator.validate(draft)
        assert result.issues[0].field == "description"

    def test_unknown_category_is_only_a_warning(self, validator):
        """Test that open categories don't block the request."""
        draft = ExpenseDraft(title="Gadget", amount=Decimal("10"), category="Gizmos")
        result = validator.validate(draft)
        assert result.is_valid is True
        assert result.issues[0].issue_type == "unknown_category"

    def test_future_date_warning(self, validator):
        draft = ExpenseDraft(
            title="Concert",
            amount=Decimal("10"),
            date=datetime.now() + timedelta(days=10),
        )
        result = validator.validate(draft)
        assert result.is_valid is True
        assert result.issues[0].issue_type == "future_date"

    def test_today_is_not_future(self, validator):
        draft = ExpenseDraft(title="Tea", amount=Decimal("10"), date=datetime.now())
        assert validator.validate(draft).issues == []


class TestParseForm:
    """Tests for turning raw form values into a draft."""

    def test_parse_valid_form(self, validator):
        draft, result = validator.parse_form(
            title="Uber ride",
            amount="250.50",
            category="Transport",
            description="Airport",
        )
        assert result.is_valid is True
        assert draft.amount == Decimal("250.50")
        assert draft.category == "Transport"
        assert draft.description == "Airport"

    def test_parse_numeric_amount(self, validator):
        draft, result = validator.parse_form(title="Tea", amount=12.5)
        assert draft.amount == Decimal("12.5")
        assert result.is_valid is True

    def test_parse_non_numeric_amount(self, validator):
        """Test that garbage amounts are reported, not raised."""
        draft, result = validator.parse_form(title="Tea", amount="twelve")
        assert draft is None
        assert result.issues[0].issue_type == "invalid_format"
        assert "twelve" in result.issues[0].message

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", "-inf"])
    def test_parse_non_finite_amount(self, validator, amount):
        draft, result = validator.parse_form(title="Tea", amount=amount)
        assert draft is None
        assert result.issues[0].issue_type == "invalid_format"

    def test_parse_empty_form(self, validator):
        draft, result = validator.parse_form(title="", amount="")
        assert draft is not None
        assert result.error_count == 2

    def test_parse_blank_description_becomes_none(self, validator):
        draft, _ = validator.parse_form(title="Tea", amount="1", description="")
        assert draft.description is None

    def test_parse_keeps_explicit_date(self, validator):
        when = datetime(2024, 3, 5, 9, 0)
        draft, _ = validator.parse_form(title="Tea", amount="1", date=when)
        assert draft.date == when

    def test_parse_defaults_category(self, validator):
        draft, _ = validator.parse_form(title="Tea", amount="1", category=None)
        assert draft.category == "Food"


class TestSummary:
    """Tests for the one-line notification summary."""

    def test_missing_title_and_amount(self, validator):
        _, result = validator.parse_form(title="", amount="")
        assert validator.get_user_friendly_summary(result) == "Please fill title and amount!"

    def test_missing_title_only(self, validator):
        _, result = validator.parse_form(title="", amount="10")
        assert validator.get_user_friendly_summary(result) == "Please fill title!"

    def test_mixed_errors_are_joined(self, validator):
        _, result = validator.parse_form(title="", amount="-1")
        assert validator.get_user_friendly_summary(result) == (
            "Title is required; Amount cannot be negative"
        )

    def test_warnings_only(self, validator):
        _, result = validator.parse_form(title="Gadget", amount="1", category="Gizmos")
        assert validator.get_user_friendly_summary(result) == "'Gizmos' is not a standard category"

    def test_all_clear(self, validator):
        _, result = validator.parse_form(title="Tea", amount="1")
        assert validator.get_user_friendly_summary(result) == "All checks passed"
