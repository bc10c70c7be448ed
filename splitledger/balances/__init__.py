"""
Balance Engine

Pure functions from expense collections to balance views. Nothing here
performs I/O or mutates its inputs, so resolvers can be called per group
in any order or in parallel.
"""

from splitledger.balances.aggregate import calculate_total_balances
from splitledger.balances.friend import calculate_friend_balances, net_with_friend
from splitledger.balances.group import calculate_group_balances
from splitledger.balances.lookups import (
    UNKNOWN_USER_NAME,
    get_all_users_in_expenses,
    get_user_name,
)
from splitledger.balances.money import format_amount, get_symbol, round_money

__all__ = [
    "UNKNOWN_USER_NAME",
    "calculate_friend_balances",
    "calculate_group_balances",
    "calculate_total_balances",
    "format_amount",
    "get_all_users_in_expenses",
    "get_symbol",
    "get_user_name",
    "net_with_friend",
    "round_money",
]
