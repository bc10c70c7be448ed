"""
Data Models Package

Pydantic models for ledger records, derived balances and audit events.
"""

from splitledger.models.ledger import (
    Expense,
    ExpenseCategory,
    Group,
    Transaction,
    TransactionType,
    User,
)
from splitledger.models.balance import (
    ZERO,
    BalanceCalculation,
    FriendBalance,
    GroupBalance,
    LedgerSummary,
    ValidationIssue,
    ValidationResult,
)
from splitledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger records
    "Expense",
    "ExpenseCategory",
    "Group",
    "Transaction",
    "TransactionType",
    "User",
    # Derived balances
    "ZERO",
    "BalanceCalculation",
    "FriendBalance",
    "GroupBalance",
    "LedgerSummary",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
