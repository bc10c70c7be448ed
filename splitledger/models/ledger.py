"""
Core Ledger Records

Users, groups, expenses and settlement transactions as supplied by the
surrounding application.

DESIGN DECISION: Expense is deliberately permissive. A record with a zero
amount or an empty split can still be constructed so the validator can
report on it. The balance resolvers only ever see records that passed
validation.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class ExpenseCategory(str, Enum):
    """Categories offered when recording a shared expense."""
    FOOD = "food"
    TRANSPORTATION = "transportation"
    UTILITIES = "utilities"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    RENT = "rent"
    GROCERIES = "groceries"
    OTHER = "other"


class TransactionType(str, Enum):
    """What moved money between two users."""
    SETTLEMENT = "settlement"
    EXPENSE = "expense"
    RIDE = "ride"
    CHORE_REWARD = "chore_reward"


# =============================================================================
# IDENTITY RECORDS
# =============================================================================

class User(BaseModel):
    """
    A person taking part in shared expenses.

    Immutable once created. Everything else refers to users by id.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str
    name: str
    email: str
    profile_picture: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Group(BaseModel):
    """
    A named set of members sharing a ledger.

    Members are stored as a list; order carries no meaning.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str
    name: str
    description: Optional[str] = None
    members: list[str] = Field(default_factory=list)
    created_by: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def has_member(self, user_id: str) -> bool:
        return user_id in self.members


# =============================================================================
# EXPENSES
# =============================================================================

class Expense(BaseModel):
    """
    A single shared expense.

    An expense with a group_id belongs to that group's ledger. Without one
    it is a direct expense settled one-on-one between friends.

    CRITICAL: Drafts never take part in balance computation.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    description: Optional[str] = None
    amount: Decimal = Field(
        ...,
        description="Total amount in `currency`"
    )
    currency: str
    category: ExpenseCategory = ExpenseCategory.OTHER
    paid_by: str = Field(
        ...,
        description="User who fronted the money"
    )
    split_between: list[str] = Field(
        default_factory=list,
        description="Users sharing the cost equally (may include the payer)"
    )
    group_id: Optional[str] = None
    date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    is_draft: bool = False
    receipt: Optional[str] = Field(
        default=None,
        description="Reference to a receipt image"
    )

    @property
    def is_direct(self) -> bool:
        """True for expenses outside any group."""
        return self.group_id is None

    @property
    def share(self) -> Decimal:
        """Equal share owed by each participant."""
        return self.amount / len(self.split_between)


class Transaction(BaseModel):
    """
    Money moved from one user to another outside of an expense split.

    Settlements are recorded as transactions; they are history, not inputs
    to the balance resolvers.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    from_user_id: str
    to_user_id: str
    amount: Decimal = Field(..., gt=0)
    currency: str
    description: str = ""
    date: datetime = Field(default_factory=datetime.utcnow)
    type: TransactionType = TransactionType.SETTLEMENT
