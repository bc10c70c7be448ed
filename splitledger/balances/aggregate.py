"""Aggregate Balance Combiner"""

from typing import Iterable

from splitledger.models.balance import ZERO, BalanceCalculation, FriendBalance, GroupBalance


def calculate_total_balances(
    group_balances: Iterable[GroupBalance],
    friend_balances: Iterable[FriendBalance],
) -> BalanceCalculation:
    """
    Combine group and friend balances into one overall position.

    Group totals are summed as they are. Each friend balance lands in
    total_owed when positive and in total_owing (by magnitude) when
    negative.

    detailed_balances stays empty: per-counterparty detail is only
    meaningful per group or per friend.
    """
    total_owed = ZERO
    total_owing = ZERO

    for group_balance in group_balances:
        total_owed += group_balance.total_owed
        total_owing += group_balance.total_owing

    for friend_balance in friend_balances:
        if friend_balance.balance > 0:
            total_owed += friend_balance.balance
        else:
            total_owing += abs(friend_balance.balance)

    return BalanceCalculation(
        total_owed=total_owed,
        total_owing=total_owing,
    )
