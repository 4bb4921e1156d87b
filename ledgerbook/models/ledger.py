"""
Core Data Models for Ledgerbook

These models define the schemas for all data flowing through the engine.
They are designed to:
1. Map one-to-one onto the persisted JSON records
2. Keep amounts exact (Decimal) while storing them as plain JSON numbers
3. Be cheap to deep-copy, so readers only ever see snapshots

DESIGN DECISION: The wire format uses camelCase keys (createdAt, appliesTo)
while the Python attributes are snake_case. Aliases bridge the two.

Persisted records keep their strings verbatim: no trimming, no length
caps. One odd record must never make a whole stored collection
unreadable. Input rules live in LedgerValidator instead.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
)


# Amounts stay Decimal in memory and become JSON numbers on disk
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money. The sign of an entry lives here, never in the amount."""
    IN = "IN"
    OUT = "OUT"


class CategoryScope(str, Enum):
    """
    Which transaction types a category is offered for.

    Advisory only: transactions reference categories by name and the
    engine never rejects a transaction whose type disagrees.
    """
    IN = "IN"
    OUT = "OUT"
    BOTH = "BOTH"


class TimeFilter(str, Enum):
    """Time window of a transaction query."""
    ALL = "ALL"
    TODAY = "TODAY"
    THIS_MONTH = "THIS_MONTH"


class TypeFilter(str, Enum):
    """Transaction type restriction of a query."""
    ALL = "ALL"
    IN = "IN"
    OUT = "OUT"


ALL_CATEGORIES = "ALL"


# =============================================================================
# LEDGER ENTITIES
# =============================================================================

class Category(BaseModel):
    """
    A user-facing label for transactions.

    Older payloads carry the scope under "type"; it is accepted on load
    and always written back as "appliesTo".
    """
    id: str = Field(..., min_length=1)
    name: str = Field(
        ...,
        description="Display name, unique case-insensitively"
    )
    applies_to: CategoryScope = Field(
        default=CategoryScope.BOTH,
        validation_alias=AliasChoices("appliesTo", "applies_to", "type"),
        serialization_alias="appliesTo",
    )

    def matches_name(self, name: str) -> bool:
        """Case-insensitive name comparison used for uniqueness."""
        return self.name.lower() == name.strip().lower()


class Transaction(BaseModel):
    """A single dated income or expense entry inside one book."""
    id: str = Field(..., min_length=1)
    amount: Annotated[Money, Field(ge=0, description="Magnitude; sign comes from type")]
    category: str = Field(
        ...,
        description="Category name (referenced by name, not id)"
    )
    description: str = Field(default="")
    date: datetime = Field(
        ...,
        description="When the entry happened (date and time)"
    )
    type: TransactionType


class Book(BaseModel):
    """
    A named container of transactions, e.g. one month of household spending.

    The book owns its transactions outright: they are embedded, so deleting
    the book removes them with it.
    """
    id: str = Field(..., min_length=1)
    name: str
    created_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("createdAt", "created_at"),
        serialization_alias="createdAt",
    )
    transactions: list[Transaction] = Field(default_factory=list)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Look up a transaction by id within this book."""
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None


DEFAULT_CATEGORY_SPECS: list[tuple[str, CategoryScope]] = [
    ("Food", CategoryScope.OUT),
    ("Transport", CategoryScope.OUT),
    ("Salary", CategoryScope.IN),
    ("Shopping", CategoryScope.OUT),
    ("Entertainment", CategoryScope.OUT),
    ("Health", CategoryScope.OUT),
    ("Business", CategoryScope.IN),
    ("Loan", CategoryScope.BOTH),
    ("Rent", CategoryScope.OUT),
    ("Other", CategoryScope.BOTH),
]


def default_categories() -> list[Category]:
    """Fresh copy of the built-in category vocabulary (ids "1".."10")."""
    return [
        Category(id=str(idx), name=name, applies_to=scope)
        for idx, (name, scope) in enumerate(DEFAULT_CATEGORY_SPECS, start=1)
    ]


# =============================================================================
# FORM INPUT
# =============================================================================

class TransactionDraft(BaseModel):
    """
    Unvalidated transaction input as it arrives from a form.

    Everything the user might leave blank is optional here.
    LedgerValidator decides whether a draft may become a Transaction.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Optional[Decimal] = None
    category: Optional[str] = None
    description: str = ""
    date: Optional[datetime] = None
    type: TransactionType = TransactionType.OUT


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
        description="Type of issue (e.g., 'missing', 'invalid_value', 'duplicate')"
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


class ValidationResult(BaseModel):
    """Outcome of checking one piece of user input at the boundary."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        return not self.has_errors


# =============================================================================
# QUERY MODELS
# =============================================================================

class FilterSpec(BaseModel):
    """
    A read-only query over one book's transactions.

    The defaults select everything.
    """
    model_config = ConfigDict(frozen=True)

    time: TimeFilter = TimeFilter.ALL
    type: TypeFilter = TypeFilter.ALL
    category: str = ALL_CATEGORIES
    search: str = ""

    @property
    def is_active(self) -> bool:
        """True when a time, type or category restriction is set (search excluded)."""
        return (
            self.time != TimeFilter.ALL
            or self.type != TypeFilter.ALL
            or self.category != ALL_CATEGORIES
        )


class Totals(BaseModel):
    """Aggregates over a set of transactions."""

    total_in: Money = Decimal("0")
    total_out: Money = Decimal("0")
    balance: Money = Decimal("0")


class QueryResult(BaseModel):
    """
    Result of running a FilterSpec against a book.

    `grouped` preserves insertion order: newest day first, newest entry
    first within a day.
    """

    book_id: str
    filter: FilterSpec
    evaluated_at: datetime
    transactions: list[Transaction] = Field(default_factory=list)
    grouped: dict[str, list[Transaction]] = Field(default_factory=dict)
    totals: Totals = Field(default_factory=Totals)

    @property
    def result_count(self) -> int:
        return len(self.transactions)

    @property
    def data_found(self) -> bool:
        return bool(self.transactions)


class ExportDocument(BaseModel):
    """A rendered report plus the filename suggested for saving it."""

    filename: str
    content: str
    media_type: str = "text/csv"
