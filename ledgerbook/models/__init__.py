"""
Data Models Package

This package contains all Pydantic models used by the ledger engine.
All data flowing through the system must conform to these schemas.
"""

from ledgerbook.models.ledger import (
    ALL_CATEGORIES,
    Book,
    Category,
    CategoryScope,
    ExportDocument,
    FilterSpec,
    QueryResult,
    TimeFilter,
    Totals,
    Transaction,
    TransactionDraft,
    TransactionType,
    TypeFilter,
    ValidationIssue,
    ValidationResult,
    default_categories,
)
from ledgerbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "ALL_CATEGORIES",
    "Book",
    "Category",
    "CategoryScope",
    "ExportDocument",
    "FilterSpec",
    "QueryResult",
    "TimeFilter",
    "Totals",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "TypeFilter",
    "ValidationIssue",
    "ValidationResult",
    "default_categories",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
