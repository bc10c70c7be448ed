"""Tests for the two-stage expense validator."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from conftest import ALICE, BOB, CHARLIE, make_expense
from splitledger.config.settings import LedgerSettings
from splitledger.models import Group
from splitledger.validation import ExpenseValidator, validate_expense_data


class TestValidateExpenseData:
    """Tests for the boolean validity predicate."""

    def test_well_formed_expense(self, expenses):
        """Test a complete record passes."""
        assert validate_expense_data(expenses[0]) is True

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1"), Decimal("-0.01")])
    def test_non_positive_amount(self, amount):
        """Test amount <= 0 is rejected."""
        assert validate_expense_data(make_expense(amount=amount)) is False

    @pytest.mark.parametrize("field", ["id", "title", "currency", "paid_by"])
    def test_empty_required_field(self, field):
        """Test empty strings count as missing."""
        assert validate_expense_data(make_expense(**{field: ""})) is False

    def test_whitespace_title_is_empty(self):
        """Test whitespace is stripped before the check."""
        assert validate_expense_data(make_expense(title="   ")) is False

    def test_empty_split(self):
        assert validate_expense_data(make_expense(split_between=[])) is False

    def test_missing_date(self):
        assert validate_expense_data(make_expense(date=None)) is False


class TestExpenseValidator:
    """Tests for ExpenseValidator.validate."""

    @pytest.fixture
    def validator(self):
        return ExpenseValidator(LedgerSettings(max_expense_amount=1000, future_date_tolerance_days=1))

    def test_valid_expense_has_no_issues(self, validator):
        result = validator.validate(make_expense())
        assert result.is_valid is True
        assert result.schema_valid is True
        assert result.semantic_valid is True
        assert result.issues == []

    def test_schema_errors_are_reported_per_field(self, validator):
        """Test every failing requirement becomes an error issue."""
        expense = make_expense(amount=Decimal("0"), split_between=[], date=None)
        result = validator.validate(expense)
        assert result.is_valid is False
        assert result.has_errors is True
        assert {i.field for i in result.issues} == {"amount", "split_between", "date"}
        assert result.error_count == 3

    def test_semantic_stage_skipped_after_schema_failure(self, validator):
        """Test warnings are not computed for malformed expenses."""
        expense = make_expense(amount=Decimal("-5000"))
        result = validator.validate(expense)
        assert result.semantic_valid is False
        assert result.warnings == []

    def test_large_amount_is_a_warning(self, validator):
        """Test unusually high amounts warn but stay valid."""
        result = validator.validate(make_expense(amount=Decimal("5000")))
        assert result.is_valid is True
        assert result.has_errors is False
        assert any(i.issue_type == "suspicious_value" for i in result.issues)
        assert len(result.warnings) == 1

    def test_future_date_is_a_warning(self, validator):
        result = validator.validate(make_expense(date=datetime.now() + timedelta(days=10)))
        assert result.is_valid is True
        assert [i.issue_type for i in result.issues] == ["future_date"]

    def test_repeated_participant_is_a_warning(self, validator):
        result = validator.validate(make_expense(split_between=[ALICE, BOB, BOB]))
        assert result.is_valid is True
        assert [i.issue_type for i in result.issues] == ["duplicate_participant"]

    def test_non_members_are_warnings(self, validator):
        """Test group membership is checked when a group is given."""
        group = Group(id="g1", name="Flat", members=[ALICE, BOB], created_by=ALICE)
        expense = make_expense(paid_by=CHARLIE, split_between=[ALICE, CHARLIE], group_id="g1")
        result = validator.validate(expense, group)
        assert result.is_valid is True
        assert {i.field for i in result.issues} == {"paid_by", "split_between"}

    def test_group_ignored_for_other_group_ids(self, validator):
        group = Group(id="g1", name="Flat", members=[ALICE], created_by=ALICE)
        expense = make_expense(group_id="g2")
        assert validator.validate(expense, group).issues == []

    def test_is_valid_matches_predicate(self, validator, expenses):
        """Test the detailed result agrees with validate_expense_data."""
        candidates = expenses + [make_expense(amount=Decimal("0")), make_expense(title="")]
        for expense in candidates:
            assert validator.validate(expense).is_valid == validate_expense_data(expense)

    def test_summary_for_clean_expense(self, validator):
        result = validator.validate(make_expense())
        assert validator.get_user_friendly_summary(result) == "All checks passed."

    def test_summary_lists_errors(self, validator):
        result = validator.validate(make_expense(amount=Decimal("0")))
        summary = validator.get_user_friendly_summary(result)
        assert "can't be saved" in summary
        assert "Amount must be greater than zero" in summary


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
