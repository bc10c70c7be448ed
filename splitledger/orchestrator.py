"""
Ledger Orchestrator

Ties the expense book, the validator, the audit trail and the pure balance
resolvers together.

DESIGN DECISION: The orchestrator enforces the boundaries:
- No final expense reaches the book without passing validation
- Drafts are validated again before they are published
- Every change is audited
- Balance reads never write to the book

All collaborators are passed in explicitly. Build a default set with
create_ledger_components().
"""

from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

import structlog

from splitledger.audit import AuditLogger, configure_logging, create_correlation_id
from splitledger.balances import (
    calculate_friend_balances,
    calculate_group_balances,
    calculate_total_balances,
    net_with_friend,
)
from splitledger.config import get_settings
from splitledger.config.settings import LedgerSettings
from splitledger.models.balance import (
    FriendBalance,
    GroupBalance,
    LedgerSummary,
    ValidationResult,
)
from splitledger.models.ledger import Expense, Group, Transaction, TransactionType
from splitledger.services.storage import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)
from splitledger.validation import ExpenseValidator


logger = structlog.get_logger(__name__)


class InvalidExpenseError(ValueError):
    """Raised when an expense fails schema validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        fields = ", ".join(i.field for i in result.issues if i.severity == "error")
        super().__init__(f"Invalid expense {result.expense_id!r}: {fields}")


class SettlementError(ValueError):
    """Raised for settlements that cannot be recorded."""
    pass


class LedgerService:
    """
    Records expenses and answers balance questions for a user.

    Flow for a new expense:
    1. Validate → schema errors reject, semantic warnings are kept
    2. Save → expense book
    3. Audit → expense added
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._storage = storage
        self._settings = settings or get_settings()
        self._validator = validator or ExpenseValidator(self._settings)
        self._audit_logger = audit_logger

    @property
    def storage(self) -> LedgerStorageInterface:
        return self._storage

    # =========================================================================
    # WRITES
    # =========================================================================

    def _group_for(self, expense: Expense) -> Optional[Group]:
        return self._storage.get_group(expense.group_id) if expense.group_id else None

    def _validate_or_raise(
        self,
        expense: Expense,
        correlation_id: UUID,
    ) -> ValidationResult:
        result = self._validator.validate(expense, self._group_for(expense))

        if not result.is_valid:
            if self._audit_logger:
                self._audit_logger.log_expense_rejected(
                    expense_id=expense.id,
                    issues=[
                        {"field": i.field, "type": i.issue_type, "message": i.message}
                        for i in result.issues
                    ],
                    correlation_id=correlation_id,
                )
            raise InvalidExpenseError(result)

        return result

    def record_expense(
        self,
        expense: Expense,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Expense, ValidationResult]:
        """
        Validate and store a new expense.

        Drafts are stored even when incomplete; publish_draft() checks them
        before they count toward balances.

        Returns:
            (stored_expense, validation_result) - the result carries any
            warnings worth showing to the user

        Raises:
            InvalidExpenseError: If a final expense fails schema validation
            DuplicateError: If the id is already taken
        """
        correlation_id = correlation_id or create_correlation_id()

        if expense.is_draft:
            result = self._validator.validate(expense, self._group_for(expense))
        else:
            result = self._validate_or_raise(expense, correlation_id)
        try:
            stored = self._storage.add_expense(expense)
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"expense_id": expense.id},
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            self._audit_logger.log_expense_added(stored, correlation_id)

        return stored, result

    def update_expense(
        self,
        expense_id: str,
        updates: dict[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> Expense:
        """
        Apply updates to an expense, re-validating the result.

        Drafts may stay incomplete; published expenses must remain valid.

        Raises:
            NotFoundError: If the expense doesn't exist
            InvalidExpenseError: If a published expense would become invalid
        """
        correlation_id = correlation_id or create_correlation_id()

        current = self._require_expense(expense_id)
        candidate = Expense.model_validate({**current.model_dump(), **updates})
        if not candidate.is_draft:
            self._validate_or_raise(candidate, correlation_id)

        updated = self._storage.update_expense(expense_id, updates)

        if self._audit_logger:
            self._audit_logger.log_expense_updated(
                expense_id=expense_id,
                fields=sorted(updates),
                correlation_id=correlation_id,
            )

        return updated

    def publish_draft(
        self,
        expense_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> Expense:
        """
        Turn a draft into a final expense so it counts toward balances.

        Raises:
            NotFoundError: If the expense doesn't exist
            InvalidExpenseError: If the draft is still incomplete
        """
        correlation_id = correlation_id or create_correlation_id()

        draft = self._require_expense(expense_id)
        if not draft.is_draft:
            return draft

        self._validate_or_raise(draft, correlation_id)
        published = self._storage.publish_draft_expense(expense_id)

        if self._audit_logger:
            self._audit_logger.log_draft_published(expense_id, correlation_id)

        return published

    def delete_expense(
        self,
        expense_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        deleted = self._storage.delete_expense(expense_id)
        if deleted and self._audit_logger:
            self._audit_logger.log_expense_deleted(expense_id, correlation_id)
        return deleted

    def add_group(self, group: Group, correlation_id: Optional[UUID] = None) -> Group:
        stored = self._storage.add_group(group)
        if self._audit_logger:
            self._audit_logger.log_group_added(stored, correlation_id)
        return stored

    def delete_group(self, group_id: str, correlation_id: Optional[UUID] = None) -> int:
        """
        Delete a group together with its expenses.

        Returns:
            Number of expenses removed
        """
        removed = self._storage.delete_group(group_id)
        if self._audit_logger:
            self._audit_logger.log_group_deleted(group_id, removed, correlation_id)
        return removed

    def settle_balance(
        self,
        from_user_id: str,
        to_user_id: str,
        amount: Decimal,
        currency: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Record that from_user_id paid to_user_id outside of any expense.

        The settlement is kept as transaction history. Balances are still
        computed from expenses alone.

        Raises:
            SettlementError: For non-positive amounts or self-settlement
        """
        amount = Decimal(str(amount))
        if amount <= 0:
            raise SettlementError("Settlement amount must be greater than zero")
        if from_user_id == to_user_id:
            raise SettlementError("Cannot settle a balance with yourself")

        transaction = self._storage.record_transaction(Transaction(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            amount=amount,
            currency=currency or self._settings.default_currency,
            description="Balance settlement",
            type=TransactionType.SETTLEMENT,
        ))

        if self._audit_logger:
            self._audit_logger.log_settlement(transaction, correlation_id)

        return transaction

    def _require_expense(self, expense_id: str) -> Expense:
        expense = self._storage.get_expense(expense_id)
        if expense is None:
            raise NotFoundError(f"Expense {expense_id} not found")
        return expense

    # =========================================================================
    # READS
    # =========================================================================

    def group_balance(self, group_id: str, user_id: str) -> GroupBalance:
        """
        Raises:
            NotFoundError: If the group doesn't exist
        """
        group = self._storage.get_group(group_id)
        if group is None:
            raise NotFoundError(f"Group {group_id} not found")
        return calculate_group_balances(
            group,
            self._storage.get_group_expenses(group_id),
            self._storage.list_users(),
            user_id,
        )

    def friend_balances(self, user_id: str) -> list[FriendBalance]:
        """Balances with every other known user across direct expenses."""
        friends = [u for u in self._storage.list_users() if u.id != user_id]
        return calculate_friend_balances(
            self._storage.list_expenses(include_drafts=False),
            friends,
            user_id,
        )

    def balance_with(self, user_id: str, friend_id: str) -> Decimal:
        """Direct-expense balance between two users, zero if none."""
        return net_with_friend(self.friend_balances(user_id), friend_id)

    def summarize(
        self,
        user_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerSummary:
        """
        Full balance picture for one user.

        Group balances cover every group the user belongs to; friend
        balances cover every other known user with direct expenses.
        """
        expenses = self._storage.list_expenses(include_drafts=False)
        users = self._storage.list_users()

        group_balances = [
            calculate_group_balances(group, expenses, users, user_id)
            for group in self._storage.list_groups(member_id=user_id)
        ]
        friend_balances = calculate_friend_balances(
            expenses,
            [u for u in users if u.id != user_id],
            user_id,
        )
        total = calculate_total_balances(group_balances, friend_balances)

        if self._audit_logger:
            self._audit_logger.log_balances_computed(
                user_id=user_id,
                group_count=len(group_balances),
                friend_count=len(friend_balances),
                net_balance=str(total.net_balance),
                correlation_id=correlation_id,
            )

        return LedgerSummary(
            user_id=user_id,
            group_balances=group_balances,
            friend_balances=friend_balances,
            total=total,
        )

    def list_transactions(self, user_id: Optional[str] = None) -> list[Transaction]:
        return self._storage.list_transactions(user_id)


def create_ledger_components(
    storage: Optional[LedgerStorageInterface] = None,
    settings: Optional[LedgerSettings] = None,
) -> tuple[LedgerService, AuditLogger]:
    """
    Factory function to create a wired LedgerService.

    Args:
        storage: Expense book to use. Defaults to a fresh in-memory one.
        settings: Settings to use. Defaults to get_settings().

    Returns:
        (ledger_service, audit_logger)
    """
    settings = settings or get_settings()
    configure_logging(settings)

    audit_logger = AuditLogger(InMemoryAuditStorage())
    service = LedgerService(
        storage=storage or InMemoryLedgerStorage(),
        validator=ExpenseValidator(settings),
        audit_logger=audit_logger,
        settings=settings,
    )

    logger.info("ledger_components_created", environment=settings.environment)

    return service, audit_logger
