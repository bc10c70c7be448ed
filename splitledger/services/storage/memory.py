"""
In-Memory Storage

Dict-backed implementations of the storage interfaces. Used by tests and
by applications that load their collections from elsewhere and only need
the ledger for computation.

Each instance owns its own state; there is no shared module-level store.
"""

from typing import Any, Optional

from splitledger.models.audit import AuditEvent
from splitledger.models.ledger import Expense, Group, Transaction, User
from splitledger.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Expense book kept in plain dicts, insertion ordered."""

    def __init__(
        self,
        users: Optional[list[User]] = None,
        groups: Optional[list[Group]] = None,
        expenses: Optional[list[Expense]] = None,
    ):
        self._users: dict[str, User] = {}
        self._groups: dict[str, Group] = {}
        self._expenses: dict[str, Expense] = {}
        self._transactions: list[Transaction] = []

        for user in users or []:
            self.add_user(user)
        for group in groups or []:
            self.add_group(group)
        for expense in expenses or []:
            self.add_expense(expense)

    # -- users ---------------------------------------------------------------

    def add_user(self, user: User) -> User:
        if user.id in self._users:
            raise DuplicateError(f"User {user.id} already exists")
        self._users[user.id] = user
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def list_users(self) -> list[User]:
        return list(self._users.values())

    # -- groups --------------------------------------------------------------

    def add_group(self, group: Group) -> Group:
        if group.id in self._groups:
            raise DuplicateError(f"Group {group.id} already exists")
        self._groups[group.id] = group
        return group

    def get_group(self, group_id: str) -> Optional[Group]:
        return self._groups.get(group_id)

    def update_group(self, group_id: str, updates: dict[str, Any]) -> Group:
        group = self._groups.get(group_id)
        if group is None:
            raise NotFoundError(f"Group {group_id} not found")
        updated = Group.model_validate({**group.model_dump(), **updates})
        self._groups[group_id] = updated
        return updated

    def delete_group(self, group_id: str) -> int:
        if group_id not in self._groups:
            raise NotFoundError(f"Group {group_id} not found")
        del self._groups[group_id]
        removed = [
            expense_id for expense_id, expense in self._expenses.items()
            if expense.group_id == group_id
        ]
        for expense_id in removed:
            del self._expenses[expense_id]
        return len(removed)

    def list_groups(self, member_id: Optional[str] = None) -> list[Group]:
        if member_id is None:
            return list(self._groups.values())
        return [g for g in self._groups.values() if g.has_member(member_id)]

    # -- expenses ------------------------------------------------------------

    def add_expense(self, expense: Expense) -> Expense:
        if expense.id in self._expenses:
            raise DuplicateError(f"Expense {expense.id} already exists")
        self._expenses[expense.id] = expense
        return expense

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self._expenses.get(expense_id)

    def update_expense(self, expense_id: str, updates: dict[str, Any]) -> Expense:
        expense = self._expenses.get(expense_id)
        if expense is None:
            raise NotFoundError(f"Expense {expense_id} not found")
        updated = Expense.model_validate({**expense.model_dump(), **updates})
        self._expenses[expense_id] = updated
        return updated

    def delete_expense(self, expense_id: str) -> bool:
        return self._expenses.pop(expense_id, None) is not None

    def list_expenses(self, include_drafts: bool = True) -> list[Expense]:
        return [
            e for e in self._expenses.values()
            if include_drafts or not e.is_draft
        ]

    def get_group_expenses(self, group_id: str) -> list[Expense]:
        return [e for e in self._expenses.values() if e.group_id == group_id]

    # -- transactions --------------------------------------------------------

    def record_transaction(self, transaction: Transaction) -> Transaction:
        self._transactions.append(transaction)
        return transaction

    def list_transactions(self, user_id: Optional[str] = None) -> list[Transaction]:
        if user_id is None:
            return list(self._transactions)
        return [
            t for t in self._transactions
            if user_id in (t.from_user_id, t.to_user_id)
        ]


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
