"""
Friend Balance Resolver

Net position with each friend across direct (ungrouped) expenses.

Friends not touched by any qualifying expense are left out of the result
rather than reported with a zero balance.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, NamedTuple

import structlog

from splitledger.balances.group import expense_contributions
from splitledger.balances.lookups import get_user_name
from splitledger.models.balance import ZERO, FriendBalance
from splitledger.models.ledger import Expense, User


logger = structlog.get_logger(__name__)


class _Running(NamedTuple):
    balance: Decimal
    last_date: datetime


def direct_expenses(expenses: Iterable[Expense]) -> list[Expense]:
    """Non-draft expenses that belong to no group."""
    return [
        expense for expense in expenses
        if expense.is_direct and not expense.is_draft
    ]


def touched_friends(expense: Expense, current_user_id: str) -> dict[str, Decimal]:
    """
    Friends an expense touches, mapped to its effect on their balance.

    Everyone in the split is touched, even when the current user is not
    part of the expense. A payer outside the split is touched only when
    they are owed by the current user.
    """
    touched = {
        user_id: ZERO
        for user_id in expense.split_between
        if user_id != current_user_id
    }
    for counterparty_id, amount in expense_contributions(expense, current_user_id):
        touched[counterparty_id] = touched.get(counterparty_id, ZERO) + amount
    return touched


def calculate_friend_balances(
    expenses: Iterable[Expense],
    friends: Iterable[User],
    current_user_id: str,
) -> list[FriendBalance]:
    """
    Resolve one FriendBalance per friend touched by a direct expense.

    Results keep the order in which friends were first seen.
    """
    friends = list(friends)
    friend_ids = {friend.id for friend in friends}

    running: dict[str, _Running] = {}
    for expense in direct_expenses(expenses):
        for friend_id, amount in touched_friends(expense, current_user_id).items():
            if friend_id not in friend_ids:
                continue
            previous = running.get(friend_id)
            if previous is None:
                running[friend_id] = _Running(amount, expense.date)
            else:
                running[friend_id] = _Running(
                    previous.balance + amount,
                    max(previous.last_date, expense.date),
                )

    logger.debug(
        "friend_balances_resolved",
        friend_count=len(friend_ids),
        with_activity=len(running),
    )

    return [
        FriendBalance(
            friend_id=friend_id,
            friend_name=get_user_name(friend_id, friends),
            balance=data.balance,
            last_transaction=data.last_date,
        )
        for friend_id, data in running.items()
    ]


def net_with_friend(balances: Iterable[FriendBalance], friend_id: str) -> Decimal:
    """Balance with one friend, zero when they have no direct expenses."""
    for balance in balances:
        if balance.friend_id == friend_id:
            return balance.balance
    return ZERO
