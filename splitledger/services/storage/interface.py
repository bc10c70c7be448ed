"""
Abstract Storage Interface

DESIGN DECISION: The ledger never owns its persistence. The surrounding
application supplies a storage object implementing this interface (an
in-memory one ships for tests and embedding), and the service reads
collections out of it before calling the pure balance resolvers.

The interface is intentionally simple - just the operations the expense
book needs.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from splitledger.models.audit import AuditEvent
from splitledger.models.ledger import Expense, Group, Transaction, User


class LedgerStorageInterface(ABC):
    """
    Abstract interface for the expense book.

    Any storage implementation must implement these methods.
    """

    # -- users ---------------------------------------------------------------

    @abstractmethod
    def add_user(self, user: User) -> User:
        """
        Store a user.

        Raises:
            DuplicateError: If a user with this id exists
        """
        pass

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        pass

    # -- groups --------------------------------------------------------------

    @abstractmethod
    def add_group(self, group: Group) -> Group:
        """
        Store a group.

        Raises:
            DuplicateError: If a group with this id exists
        """
        pass

    @abstractmethod
    def get_group(self, group_id: str) -> Optional[Group]:
        pass

    @abstractmethod
    def update_group(self, group_id: str, updates: dict[str, Any]) -> Group:
        """
        Apply field updates to a group, validating the updated record.

        Raises:
            NotFoundError: If the group doesn't exist
            pydantic.ValidationError: If an update has the wrong type
        """
        pass

    @abstractmethod
    def delete_group(self, group_id: str) -> int:
        """
        Delete a group and every expense recorded against it.

        Returns:
            Number of expenses removed with the group

        Raises:
            NotFoundError: If the group doesn't exist
        """
        pass

    @abstractmethod
    def list_groups(self, member_id: Optional[str] = None) -> list[Group]:
        """List groups, optionally only those member_id belongs to."""
        pass

    # -- expenses ------------------------------------------------------------

    @abstractmethod
    def add_expense(self, expense: Expense) -> Expense:
        """
        Store an expense.

        Raises:
            DuplicateError: If an expense with this id exists
        """
        pass

    @abstractmethod
    def get_expense(self, expense_id: str) -> Optional[Expense]:
        pass

    @abstractmethod
    def update_expense(self, expense_id: str, updates: dict[str, Any]) -> Expense:
        """
        Apply field updates to an expense, validating the updated record.

        Raises:
            NotFoundError: If the expense doesn't exist
            pydantic.ValidationError: If an update has the wrong type
        """
        pass

    @abstractmethod
    def delete_expense(self, expense_id: str) -> bool:
        """
        Delete an expense.

        Returns:
            True if it existed
        """
        pass

    @abstractmethod
    def list_expenses(self, include_drafts: bool = True) -> list[Expense]:
        pass

    @abstractmethod
    def get_group_expenses(self, group_id: str) -> list[Expense]:
        """All expenses recorded against a group, drafts included."""
        pass

    def publish_draft_expense(self, expense_id: str) -> Expense:
        """
        Mark a draft as final.

        Raises:
            NotFoundError: If the expense doesn't exist
        """
        return self.update_expense(expense_id, {"is_draft": False})

    # -- transactions --------------------------------------------------------

    @abstractmethod
    def record_transaction(self, transaction: Transaction) -> Transaction:
        pass

    @abstractmethod
    def list_transactions(self, user_id: Optional[str] = None) -> list[Transaction]:
        """List transactions, optionally only those involving user_id."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """Events for one entity in chronological order."""
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
