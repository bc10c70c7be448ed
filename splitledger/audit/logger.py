"""
Audit Logger

Every change to the expense book is logged:
1. To the structured local log (for debugging)
2. To an optional audit storage backend (for history)

The audit logger gracefully handles storage failures - a broken audit
backend never stops an expense from being recorded.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from splitledger.config.settings import LedgerSettings
from splitledger.models.audit import AuditEvent, AuditEventBuilder
from splitledger.models.ledger import Expense, Group, Transaction
from splitledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(settings: LedgerSettings) -> None:
    """Route splitledger log output through stdlib at the configured level."""
    logging.basicConfig(format="%(message)s")
    logging.getLogger("splitledger").setLevel(settings.log_level)


class AuditLogger:
    """Central audit logging service."""

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("splitledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_expense_added(self, expense: Expense, correlation_id: Optional[UUID] = None) -> None:
        self.log(AuditEventBuilder.expense_added(
            expense_id=expense.id,
            title=expense.title,
            amount=str(expense.amount),
            currency=expense.currency,
            group_id=expense.group_id,
            is_draft=expense.is_draft,
            correlation_id=correlation_id,
        ))

    def log_expense_rejected(
        self,
        expense_id: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_rejected(
            expense_id=expense_id,
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_expense_updated(
        self,
        expense_id: str,
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_updated(
            expense_id=expense_id,
            fields=fields,
            correlation_id=correlation_id,
        ))

    def log_expense_deleted(self, expense_id: str, correlation_id: Optional[UUID] = None) -> None:
        self.log(AuditEventBuilder.expense_deleted(expense_id, correlation_id))

    def log_draft_published(self, expense_id: str, correlation_id: Optional[UUID] = None) -> None:
        self.log(AuditEventBuilder.draft_published(expense_id, correlation_id))

    def log_group_added(self, group: Group, correlation_id: Optional[UUID] = None) -> None:
        self.log(AuditEventBuilder.group_added(
            group_id=group.id,
            name=group.name,
            member_count=len(group.members),
            created_by=group.created_by,
            correlation_id=correlation_id,
        ))

    def log_group_deleted(
        self,
        group_id: str,
        removed_expenses: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.group_deleted(group_id, removed_expenses, correlation_id))

    def log_settlement(self, transaction: Transaction, correlation_id: Optional[UUID] = None) -> None:
        self.log(AuditEventBuilder.settlement_recorded(
            transaction_id=transaction.id,
            from_user_id=transaction.from_user_id,
            to_user_id=transaction.to_user_id,
            amount=str(transaction.amount),
            currency=transaction.currency,
            correlation_id=correlation_id,
        ))

    def log_balances_computed(
        self,
        user_id: str,
        group_count: int,
        friend_count: int,
        net_balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.balances_computed(
            user_id=user_id,
            group_count=group_count,
            friend_count=friend_count,
            net_balance=net_balance,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action and pass it through.
    """
    return uuid4()
