"""User lookups shared by the balance resolvers."""

from typing import Iterable

from splitledger.models.ledger import Expense, User


UNKNOWN_USER_NAME = "Unknown User"


def get_user_name(user_id: str, users: Iterable[User]) -> str:
    """Display name for user_id, or "Unknown User" when not found."""
    for user in users:
        if user.id == user_id:
            return user.name
    return UNKNOWN_USER_NAME


def get_all_users_in_expenses(expenses: Iterable[Expense]) -> list[str]:
    """
    Every user id appearing as payer or participant, without duplicates.

    Ids come back in first-seen order.
    """
    seen = {}
    for expense in expenses:
        seen.setdefault(expense.paid_by, None)
        for user_id in expense.split_between:
            seen.setdefault(user_id, None)
    return list(seen)
