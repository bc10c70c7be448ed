"""
Two-Stage Expense Validation

STAGE 1 - SCHEMA VALIDATION:
- Required field presence (id, title, currency, payer, date)
- Positive amount
- Non-empty split
Any failure here makes the expense untrustworthy for the balance resolvers.

STAGE 2 - SEMANTIC VALIDATION:
- Absurd amount detection
- Future date detection
- Payer / participants outside the group
- Repeated participants in the split
Semantic issues are warnings. They never block an expense.

IMPORTANT: Validation NEVER silently fixes issues. It only reports them.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import structlog

from splitledger.config import get_settings
from splitledger.config.settings import LedgerSettings
from splitledger.models.balance import ValidationIssue, ValidationResult
from splitledger.models.ledger import Expense, Group


logger = structlog.get_logger(__name__)


def validate_expense_data(expense: Expense) -> bool:
    """
    Return True iff the expense may be fed to the balance resolvers.

    Pure predicate over the schema-level requirements.
    """
    return bool(
        expense.id
        and expense.title
        and expense.amount > 0
        and expense.currency
        and expense.paid_by
        and len(expense.split_between) > 0
        and expense.date
    )


class ExpenseValidator:
    """
    Validates expenses through a two-stage pipeline.

    Stage 1: Schema validation (decides validity)
    Stage 2: Semantic validation (warnings only, may use the group)
    """

    def __init__(self, settings: Optional[LedgerSettings] = None):
        self._settings = settings or get_settings()

    def _validate_schema(
        self,
        expense: Expense,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        for field, label in (
            ("id", "Expense id"),
            ("title", "Title"),
            ("currency", "Currency"),
            ("paid_by", "Payer"),
        ):
            if not getattr(expense, field):
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing",
                    message=f"{label} is required",
                    severity="error",
                ))

        if expense.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
                suggested_fix="Enter the total that was paid",
            ))

        if not expense.split_between:
            issues.append(ValidationIssue(
                field="split_between",
                issue_type="missing",
                message="At least one person must share the expense",
                severity="error",
                suggested_fix="Select who the expense is split between",
            ))

        if expense.date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Expense date is required",
                severity="error",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def _validate_semantic(
        self,
        expense: Expense,
        group: Optional[Group] = None,
    ) -> list[ValidationIssue]:
        """
        Stage 2: Semantic validation.

        Only produces warnings.
        """
        issues = []

        max_amount = Decimal(str(self._settings.max_expense_amount))
        if expense.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({expense.amount:,.2f} {expense.currency}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        tolerance = timedelta(days=self._settings.future_date_tolerance_days)
        # Compare in the expense's own timezone (naive stays naive)
        now = datetime.now(expense.date.tzinfo)
        if expense.date > now + tolerance:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Expense date ({expense.date.date()}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        if len(set(expense.split_between)) != len(expense.split_between):
            issues.append(ValidationIssue(
                field="split_between",
                issue_type="duplicate_participant",
                message="Someone appears more than once in the split",
                severity="warning",
                suggested_fix="Each repeated entry takes an extra share",
            ))

        if group is not None and expense.group_id == group.id:
            if not group.has_member(expense.paid_by):
                issues.append(ValidationIssue(
                    field="paid_by",
                    issue_type="not_a_member",
                    message=f"Payer {expense.paid_by} is not a member of {group.name}",
                    severity="warning",
                ))
            outsiders = [
                user_id for user_id in expense.split_between
                if not group.has_member(user_id)
            ]
            if outsiders:
                issues.append(ValidationIssue(
                    field="split_between",
                    issue_type="not_a_member",
                    message=f"Not members of {group.name}: {', '.join(outsiders)}",
                    severity="warning",
                ))

        return issues

    def validate(
        self,
        expense: Expense,
        group: Optional[Group] = None,
    ) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Args:
            expense: The expense to validate
            group: The expense's group, for membership checks

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        schema_valid, schema_issues = self._validate_schema(expense)
        all_issues.extend(schema_issues)

        # Semantic checks need a well-formed record
        semantic_valid = False
        if schema_valid:
            semantic_issues = self._validate_semantic(expense, group)
            all_issues.extend(semantic_issues)
            semantic_valid = not any(i.severity == "error" for i in semantic_issues)

        warnings = [i.message for i in all_issues if i.severity == "warning"]

        if not schema_valid:
            logger.info(
                "expense_invalid",
                expense_id=expense.id,
                fields=[i.field for i in schema_issues],
            )

        return ValidationResult(
            expense_id=expense.id,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid,
            issues=all_issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Generate a short summary of validation results for display."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if not result.schema_valid:
            lines.append("This expense can't be saved yet:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please double-check:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
