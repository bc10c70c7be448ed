"""
Group Balance Resolver

Turns a group's expenses into the current user's position inside that
group. Every qualifying expense is reduced to a list of signed
contributions, one per counterparty, which are then folded into the final
balance. Nothing is mutated in place.

Assumes validated expenses (see splitledger.validation).
"""

from decimal import Decimal
from typing import Iterable, Iterator, NamedTuple

import structlog

from splitledger.models.balance import ZERO, GroupBalance
from splitledger.models.ledger import Expense, Group, User


logger = structlog.get_logger(__name__)


class Contribution(NamedTuple):
    """One signed amount between the current user and a counterparty."""
    counterparty_id: str
    amount: Decimal  # positive: counterparty owes the current user


def expense_contributions(
    expense: Expense,
    current_user_id: str,
) -> Iterator[Contribution]:
    """
    Signed contributions of one expense from the current user's viewpoint.

    Paid by the current user: every other participant owes one share.
    Paid by someone else with the current user in the split: the current
    user owes the payer one share. Otherwise: nothing.
    """
    share = expense.share
    if expense.paid_by == current_user_id:
        for user_id in expense.split_between:
            if user_id != current_user_id:
                yield Contribution(user_id, share)
    elif current_user_id in expense.split_between:
        yield Contribution(expense.paid_by, -share)


def fold_contributions(
    contributions: Iterable[Contribution],
) -> tuple[Decimal, Decimal, dict[str, Decimal]]:
    """
    Fold contributions into (total_owed, total_owing, detailed_balances).

    Owed and owing are summed separately; they never net against each
    other even for the same counterparty.
    """
    total_owed = ZERO
    total_owing = ZERO
    detailed: dict[str, Decimal] = {}
    for counterparty_id, amount in contributions:
        if amount > 0:
            total_owed += amount
        else:
            total_owing -= amount
        detailed[counterparty_id] = detailed.get(counterparty_id, ZERO) + amount
    return total_owed, total_owing, detailed


def group_expenses(group: Group, expenses: Iterable[Expense]) -> list[Expense]:
    """Non-draft expenses recorded against this group."""
    return [
        expense for expense in expenses
        if expense.group_id == group.id and not expense.is_draft
    ]


def calculate_group_balances(
    group: Group,
    expenses: Iterable[Expense],
    users: Iterable[User],
    current_user_id: str,
) -> GroupBalance:
    """
    Resolve the current user's balance within one group.

    Args:
        group: The group to resolve
        expenses: Any expenses; only this group's non-drafts are used
        users: Known users (accepted for parity with the friend resolver)
        current_user_id: Perspective of the result

    Returns:
        GroupBalance, all zero when nothing qualifies
    """
    qualifying = group_expenses(group, expenses)
    total_owed, total_owing, detailed = fold_contributions(
        contribution
        for expense in qualifying
        for contribution in expense_contributions(expense, current_user_id)
    )

    logger.debug(
        "group_balance_resolved",
        group_id=group.id,
        expense_count=len(qualifying),
        counterparties=len(detailed),
    )

    return GroupBalance(
        group_id=group.id,
        group_name=group.name,
        members=list(group.members),
        total_owed=total_owed,
        total_owing=total_owing,
        detailed_balances=detailed,
    )
