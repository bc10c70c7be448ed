"""Shared fixtures: three users, one group and the dinner/movie/gift ledger."""

from datetime import datetime
from decimal import Decimal

import pytest

from splitledger.models import Expense, ExpenseCategory, Group, User


ALICE, BOB, CHARLIE = "1", "2", "3"


@pytest.fixture
def users():
    return [
        User(id=ALICE, name="Alice", email="alice@email.com"),
        User(id=BOB, name="Bob", email="bob@email.com"),
        User(id=CHARLIE, name="Charlie", email="charlie@email.com"),
    ]


@pytest.fixture
def group():
    return Group(id="g1", name="Test Group", members=[ALICE, BOB, CHARLIE], created_by=ALICE)


def make_expense(**overrides) -> Expense:
    fields = dict(
        id="e0",
        title="Expense",
        amount=Decimal("100"),
        currency="USD",
        category=ExpenseCategory.OTHER,
        paid_by=ALICE,
        split_between=[ALICE, BOB],
        date=datetime(2024, 6, 1, 12, 0),
    )
    fields.update(overrides)
    return Expense(**fields)


@pytest.fixture
def expenses():
    return [
        make_expense(
            id="e1", title="Dinner", amount=Decimal("300"), category=ExpenseCategory.FOOD,
            paid_by=ALICE, split_between=[ALICE, BOB, CHARLIE], group_id="g1",
            date=datetime(2024, 6, 1),
        ),
        make_expense(
            id="e2", title="Movie", amount=Decimal("60"), category=ExpenseCategory.ENTERTAINMENT,
            paid_by=BOB, split_between=[ALICE, BOB], group_id="g1",
            date=datetime(2024, 6, 2),
        ),
        make_expense(
            id="e3", title="Gift", amount=Decimal("100"),
            paid_by=ALICE, split_between=[ALICE, CHARLIE],
            date=datetime(2024, 6, 3),
        ),
    ]
