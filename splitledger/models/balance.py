"""
Derived Balance Models

Everything in this module is computed on demand from expenses and never
persisted. Amounts are signed from the perspective of the current user:
positive means money is owed TO the current user, negative means the
current user owes it.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


ZERO = Decimal("0")


# =============================================================================
# BALANCE VIEWS
# =============================================================================

class BalanceCalculation(BaseModel):
    """
    Net position of the current user.

    net_balance is always total_owed - total_owing.
    """
    model_config = ConfigDict(frozen=True)

    total_owed: Decimal = Field(
        default=ZERO,
        description="Sum of money others owe the current user"
    )
    total_owing: Decimal = Field(
        default=ZERO,
        description="Sum of money the current user owes others"
    )
    detailed_balances: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Counterparty id -> signed amount"
    )

    @computed_field
    @property
    def net_balance(self) -> Decimal:
        return self.total_owed - self.total_owing

    @property
    def is_settled(self) -> bool:
        return self.net_balance == ZERO


class GroupBalance(BalanceCalculation):
    """Balance of the current user inside one group."""

    group_id: str
    group_name: str
    members: list[str] = Field(default_factory=list)


class FriendBalance(BaseModel):
    """Net position with one counterparty across direct expenses."""
    model_config = ConfigDict(frozen=True)

    friend_id: str
    friend_name: str
    balance: Decimal
    last_transaction: datetime

    @property
    def owes_current_user(self) -> bool:
        return self.balance > ZERO


class LedgerSummary(BaseModel):
    """Everything a dashboard needs for one user."""
    model_config = ConfigDict(frozen=True)

    user_id: str
    group_balances: list[GroupBalance] = Field(default_factory=list)
    friend_balances: list[FriendBalance] = Field(default_factory=list)
    total: BalanceCalculation = Field(default_factory=BalanceCalculation)
    generated_at: datetime = Field(default_factory=datetime.utcnow)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """
    Result of the two-stage expense validation.

    Stage 1: Schema validation (required fields, positive amount)
    Stage 2: Semantic validation (warnings only)
    """

    expense_id: str
    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    schema_valid: bool
    semantic_valid: bool
    is_valid: bool = Field(
        ...,
        description="Can this expense be trusted by the resolvers?"
    )

    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
