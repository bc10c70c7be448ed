"""Expense validation package."""

from splitledger.validation.validator import ExpenseValidator, validate_expense_data

__all__ = [
    "ExpenseValidator",
    "validate_expense_data",
]
