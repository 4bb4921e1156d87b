"""
Audit Models for Ledgerbook

Every mutation of the ledger, and every persistence failure the engine
absorbs, is recorded as an audit event. This provides:
1. A visible trail for failures that are deliberately never raised
2. Debugging information when stored data turns out to be corrupt
3. Something tests can assert on instead of scraping log output

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Books
    BOOK_CREATED = "book_created"
    BOOK_UPDATED = "book_updated"
    BOOK_DELETED = "book_deleted"
    BOOK_NOT_FOUND = "book_not_found"

    # Categories
    CATEGORY_ADDED = "category_added"
    CATEGORY_DUPLICATE_IGNORED = "category_duplicate_ignored"

    # Transactions (recorded by the facade on top of a book update)
    TRANSACTION_RECORDED = "transaction_recorded"
    TRANSACTION_EDITED = "transaction_edited"
    TRANSACTION_DELETED = "transaction_deleted"
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    STORAGE_LOADED = "storage_loaded"
    STORAGE_READ_FAILED = "storage_read_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"

    # Read side
    QUERY_EXECUTED = "query_executed"
    BOOK_EXPORTED = "book_exported"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'book', 'category', 'storage')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.book_created(book_id, name)
        event = AuditEventBuilder.storage_write_failed(key, error)
    """

    @staticmethod
    def book_created(book_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BOOK_CREATED,
            entity_type="book",
            entity_id=book_id,
            description=f"Book created: {name}",
            details={"name": name},
        )

    @staticmethod
    def book_updated(book_id: str, transaction_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BOOK_UPDATED,
            entity_type="book",
            entity_id=book_id,
            description=f"Book replaced ({transaction_count} transactions)",
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def book_deleted(book_id: str, transaction_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BOOK_DELETED,
            entity_type="book",
            entity_id=book_id,
            description="Book deleted with its transactions",
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def book_not_found(book_id: str, operation: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BOOK_NOT_FOUND,
            severity=AuditSeverity.DEBUG,
            entity_type="book",
            entity_id=book_id,
            description=f"{operation} ignored: book not found",
            details={"operation": operation},
        )

    @staticmethod
    def category_added(category_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_id=category_id,
            description=f"Category added: {name}",
            details={"name": name},
        )

    @staticmethod
    def category_duplicate_ignored(name: str, existing_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_DUPLICATE_IGNORED,
            severity=AuditSeverity.DEBUG,
            entity_type="category",
            entity_id=existing_id,
            description=f"Category already exists: {name}",
            details={"name": name},
        )

    @staticmethod
    def transaction_changed(
        event_type: AuditEventType,
        book_id: str,
        transaction_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction {event_type.value.split('_')[-1]} in book {book_id}",
            details={"book_id": book_id},
        )

    @staticmethod
    def validation_failed(field_names: list[str], issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="input",
            description=f"Input rejected with {len(issues)} issues",
            details={"fields": field_names, "issues": issues},
        )

    @staticmethod
    def storage_loaded(key: str, count: int, defaulted: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type="storage",
            entity_id=key,
            description=f"Loaded {count} records from {key}",
            details={"count": count, "defaulted": defaulted},
        )

    @staticmethod
    def storage_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Could not read {key}; falling back to defaults",
            error_message=error_message,
        )

    @staticmethod
    def storage_write_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Could not write {key}; change kept in memory only",
            error_message=error_message,
        )

    @staticmethod
    def query_executed(book_id: str, result_count: int, filter_dict: dict) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_EXECUTED,
            severity=AuditSeverity.DEBUG,
            entity_type="book",
            entity_id=book_id,
            description=f"Query returned {result_count} transactions",
            details={"result_count": result_count, "filter": filter_dict},
        )

    @staticmethod
    def book_exported(book_id: str, filename: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BOOK_EXPORTED,
            entity_type="book",
            entity_id=book_id,
            description=f"Book exported to {filename}",
            details={"filename": filename, "row_count": row_count},
        )
