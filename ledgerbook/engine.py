"""
Ledger Engine Facade

This module ties together all the components and is the single surface
the presentation layer talks to:
1. Books and categories (delegated to the LedgerStore)
2. Transaction entry (validated here, applied as a whole-book update)
3. Queries and exports (read-only passes over snapshots)

DESIGN DECISION: The engine is an explicit object built once at process
start by create_ledger_engine and passed to whoever needs it. There is
no module-level ledger state.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from ledgerbook.audit import AuditLogger, configure_logging
from ledgerbook.config import Settings, get_settings
from ledgerbook.export import CsvReportFormatter
from ledgerbook.models.audit import AuditEventBuilder, AuditEventType
from ledgerbook.models.ledger import (
    Book,
    Category,
    ExportDocument,
    FilterSpec,
    QueryResult,
    TransactionDraft,
    TransactionType,
    ValidationResult,
)
from ledgerbook.queries import QueryExecutor, book_balance, categories_for
from ledgerbook.services.ids import generate_id
from ledgerbook.services.persistence import PersistenceAdapter
from ledgerbook.services.storage import (
    AuditStorageInterface,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
)
from ledgerbook.store import (
    LedgerStore,
    append_transaction,
    default_book_name,
    remove_transaction,
    replace_transaction,
)
from ledgerbook.validation import LedgerValidator, draft_to_transaction


class LedgerEngine:
    """
    Collaborator-facing API of the ledger.

    Book and category calls pass straight through to the store.
    Transaction calls validate the draft first and return it alongside
    the updated book, so the caller can show the issues.
    """

    def __init__(
        self,
        store: LedgerStore,
        query_executor: Optional[QueryExecutor] = None,
        exporter: Optional[CsvReportFormatter] = None,
        validator: Optional[LedgerValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit = audit_logger or AuditLogger()
        self._query_executor = query_executor or QueryExecutor(audit_logger=self._audit)
        self._exporter = exporter or CsvReportFormatter()
        self._validator = validator or LedgerValidator()

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def validator(self) -> LedgerValidator:
        return self._validator

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------

    def list_books(self) -> list[Book]:
        return self._store.list_books()

    def get_book(self, book_id: str) -> Optional[Book]:
        return self._store.get_book(book_id)

    def create_book(self, name: str) -> Optional[Book]:
        """Create a book. Returns None, after auditing the issues, for a blank name."""
        result = self._validator.validate_book_name(name)
        if result.has_errors:
            self._reject(result)
            return None
        return self._store.create_book(name.strip())

    def update_book(self, book: Book) -> None:
        self._store.update_book(book)

    def delete_book(self, book_id: str) -> None:
        self._store.delete_book(book_id)

    def suggest_book_name(self, now: Optional[datetime] = None) -> str:
        return default_book_name(now)

    def book_balance(self, book: Book) -> Decimal:
        return book_balance(book)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def list_categories(self) -> list[Category]:
        return self._store.list_categories()

    def add_category(self, name: str) -> Optional[Category]:
        """Add a category. Returns None for a blank or already used name."""
        result = self._validator.validate_category_name(
            name, self._store.list_categories()
        )
        if result.has_errors:
            self._reject(result)
            return None
        return self._store.add_category(name.strip())

    def categories_for(self, transaction_type: TransactionType) -> list[Category]:
        return categories_for(self._store.list_categories(), transaction_type)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def _reject(self, result: ValidationResult) -> None:
        self._audit.log(
            AuditEventBuilder.validation_failed(
                [issue.field for issue in result.issues],
                [issue.model_dump() for issue in result.issues],
            )
        )

    def record_transaction(
        self,
        book_id: str,
        draft: TransactionDraft,
        now: Optional[datetime] = None,
    ) -> tuple[Optional[Book], ValidationResult]:
        """
        Validate a draft and append it to a book.

        Returns:
            (updated_book, validation_result). updated_book is None when
            validation failed or the book does not exist.
        """
        result = self._validator.validate_transaction(draft)
        if result.has_errors:
            self._reject(result)
            return None, result

        book = self._store.get_book(book_id)
        if book is None:
            return None, result

        txn = draft_to_transaction(draft, generate_id(), now)
        updated = append_transaction(book, txn)
        self._store.update_book(updated)
        self._audit.log(
            AuditEventBuilder.transaction_changed(
                AuditEventType.TRANSACTION_RECORDED, book_id, txn.id
            )
        )
        return updated, result

    def edit_transaction(
        self,
        book_id: str,
        transaction_id: str,
        draft: TransactionDraft,
        now: Optional[datetime] = None,
    ) -> tuple[Optional[Book], ValidationResult]:
        """
        Validate a draft and replace an existing transaction with it.

        The transaction keeps its id. Returns (None, result) when
        validation failed or the book or transaction does not exist.
        """
        result = self._validator.validate_transaction(draft)
        if result.has_errors:
            self._reject(result)
            return None, result

        book = self._store.get_book(book_id)
        if book is None or book.find_transaction(transaction_id) is None:
            return None, result

        txn = draft_to_transaction(draft, transaction_id, now)
        updated = replace_transaction(book, transaction_id, txn)
        self._store.update_book(updated)
        self._audit.log(
            AuditEventBuilder.transaction_changed(
                AuditEventType.TRANSACTION_EDITED, book_id, transaction_id
            )
        )
        return updated, result

    def delete_transaction(self, book_id: str, transaction_id: str) -> Optional[Book]:
        """Remove a transaction from a book. Returns None if either is unknown."""
        book = self._store.get_book(book_id)
        if book is None or book.find_transaction(transaction_id) is None:
            return None

        updated = remove_transaction(book, transaction_id)
        self._store.update_book(updated)
        self._audit.log(
            AuditEventBuilder.transaction_changed(
                AuditEventType.TRANSACTION_DELETED, book_id, transaction_id
            )
        )
        return updated

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def query_transactions(
        self,
        book: Book,
        filter_spec: Optional[FilterSpec] = None,
        now: Optional[datetime] = None,
    ) -> QueryResult:
        return self._query_executor.execute(book, filter_spec, now)

    def export_book(self, book: Book) -> ExportDocument:
        document = self._exporter.export(book)
        self._audit.log(
            AuditEventBuilder.book_exported(
                book.id, document.filename, len(book.transactions)
            )
        )
        return document


def build_kv_store(settings: Settings) -> KeyValueStoreInterface:
    """Instantiate the configured key-value backend."""
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(storage.path, write_attempts=storage.write_attempts)


def create_ledger_engine(
    settings: Optional[Settings] = None,
    kv_store: Optional[KeyValueStoreInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> LedgerEngine:
    """
    Factory function to create all engine components.

    Args:
        settings: Configuration; defaults to get_settings()
        kv_store: Backend override (tests pass an InMemoryKeyValueStore)
        audit_storage: Optional sink that keeps audit events for inspection

    Returns:
        A LedgerEngine with state already loaded
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    audit_logger = AuditLogger(audit_storage)
    storage_settings = settings.storage

    persistence = PersistenceAdapter(
        kv_store or build_kv_store(settings),
        audit_logger=audit_logger,
        books_key=storage_settings.books_key,
        categories_key=storage_settings.categories_key,
    )
    store = LedgerStore(persistence, audit_logger=audit_logger)

    return LedgerEngine(
        store,
        query_executor=QueryExecutor(
            label_format=settings.app.group_label_format,
            audit_logger=audit_logger,
        ),
        exporter=CsvReportFormatter(settings.export),
        validator=LedgerValidator(),
        audit_logger=audit_logger,
    )
