"""
Boundary Validation

DESIGN DECISION: The LedgerStore trusts its input. Everything a user
types is checked here, at the edge, before it reaches the store:
- Book names must not be blank
- Category names must not be blank or collide (case-insensitive)
- Transactions need a positive amount and a category

IMPORTANT: Validation NEVER raises and NEVER silently fixes issues.
It reports them so the caller can show them to the user.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from ledgerbook.models.ledger import (
    Category,
    Transaction,
    TransactionDraft,
    ValidationIssue,
    ValidationResult,
)


class LedgerValidator:
    """Validates user input for books, categories and transactions."""

    def validate_book_name(self, name: Optional[str]) -> ValidationResult:
        issues = []
        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Book name is required",
                severity="error",
            ))
        return ValidationResult(issues=issues)

    def validate_category_name(
        self,
        name: Optional[str],
        existing: Iterable[Category] = (),
    ) -> ValidationResult:
        issues = []
        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Category name is required",
                severity="error",
            ))
        elif any(c.matches_name(name) for c in existing):
            issues.append(ValidationIssue(
                field="name",
                issue_type="duplicate",
                message=f"A category named '{name.strip()}' already exists",
                severity="error",
            ))
        return ValidationResult(issues=issues)

    def validate_transaction(self, draft: TransactionDraft) -> ValidationResult:
        """
        Check a transaction draft.

        Checks:
        - Amount present and greater than zero
        - Category present
        - Date present (a missing date is allowed and becomes "now")
        """
        issues = []

        if draft.amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
        elif not draft.amount.is_finite() or draft.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            ))

        if not draft.category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
            ))

        if draft.date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="defaulted",
                message="No date given; the current time will be used",
                severity="info",
            ))

        return ValidationResult(issues=issues)


def draft_to_transaction(
    draft: TransactionDraft,
    transaction_id: str,
    now: Optional[datetime] = None,
) -> Transaction:
    """
    Build a Transaction from a draft that passed validate_transaction.

    Raises:
        ValueError: If the draft is missing its amount or category
    """
    if draft.amount is None or not draft.category:
        raise ValueError("Draft must be validated before conversion")

    return Transaction(
        id=transaction_id,
        amount=Decimal(draft.amount),
        category=draft.category,
        description=draft.description,
        date=draft.date or now or datetime.now(timezone.utc),
        type=draft.type,
    )
