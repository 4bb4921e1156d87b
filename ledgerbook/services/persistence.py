"""
Persistence Adapter

Maps the book and category collections to and from a key-value store.

DESIGN DECISION: load and save never raise. A corrupt payload, a full
quota or an unavailable backend must not take the ledger down with it:
- Reads fall back to an empty book list / the default categories
- Writes keep the in-memory change and report the failure
Every absorbed failure is emitted as an audit event, so it is visible
in the structured log and assertable in tests.

Writes are whole-collection replaces under fixed schema keys; there are
no partial writes and no migrations.
"""

from typing import Optional

from pydantic import TypeAdapter, ValidationError

from ledgerbook.audit.logger import AuditLogger
from ledgerbook.models.audit import AuditEventBuilder
from ledgerbook.models.ledger import Book, Category, default_categories
from ledgerbook.services.storage.interface import KeyValueStoreInterface, StorageError


BOOKS_KEY = "app-books-v1"
CATEGORIES_KEY = "app-categories-v1"

_BOOK_LIST = TypeAdapter(list[Book])
_CATEGORY_LIST = TypeAdapter(list[Category])


class PersistenceAdapter:
    """
    Serializes ledger collections into a KeyValueStoreInterface.

    One instance per process, shared by reference with the LedgerStore.
    """

    def __init__(
        self,
        kv_store: KeyValueStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        books_key: str = BOOKS_KEY,
        categories_key: str = CATEGORIES_KEY,
    ):
        self._kv = kv_store
        self._audit = audit_logger or AuditLogger()
        self._books_key = books_key
        self._categories_key = categories_key

    @property
    def books_key(self) -> str:
        return self._books_key

    @property
    def categories_key(self) -> str:
        return self._categories_key

    def _read(self, key: str, adapter: TypeAdapter) -> Optional[list]:
        """
        Decode the list stored under key.

        Returns None when the key is absent or the payload is unusable.
        """
        try:
            payload = self._kv.get(key)
        except StorageError as e:
            self._audit.log(AuditEventBuilder.storage_read_failed(key, str(e)))
            return None

        if payload is None:
            return None

        try:
            return adapter.validate_json(payload)
        except (ValidationError, ValueError) as e:
            self._audit.log(AuditEventBuilder.storage_read_failed(key, str(e)))
            return None

    def _write(self, key: str, adapter: TypeAdapter, items: list) -> bool:
        try:
            payload = adapter.dump_json(items, by_alias=True).decode("utf-8")
            self._kv.set(key, payload)
            return True
        except Exception as e:
            self._audit.log(AuditEventBuilder.storage_write_failed(key, str(e)))
            return False

    def load_books(self) -> list[Book]:
        """Persisted books, or an empty list when absent or unreadable."""
        books = self._read(self._books_key, _BOOK_LIST)
        if books is None:
            books = []
            self._audit.log(AuditEventBuilder.storage_loaded(self._books_key, 0, True))
        else:
            self._audit.log(
                AuditEventBuilder.storage_loaded(self._books_key, len(books), False)
            )
        return books

    def save_books(self, books: list[Book]) -> bool:
        """
        Overwrite the persisted books.

        Returns False (after logging) if the write failed; never raises.
        """
        return self._write(self._books_key, _BOOK_LIST, books)

    def load_categories(self) -> list[Category]:
        """Persisted categories, or the default vocabulary when absent or unreadable."""
        categories = self._read(self._categories_key, _CATEGORY_LIST)
        if categories is None:
            categories = default_categories()
            self._audit.log(
                AuditEventBuilder.storage_loaded(
                    self._categories_key, len(categories), True
                )
            )
        else:
            self._audit.log(
                AuditEventBuilder.storage_loaded(
                    self._categories_key, len(categories), False
                )
            )
        return categories

    def save_categories(self, categories: list[Category]) -> bool:
        """Overwrite the persisted categories. Never raises."""
        return self._write(self._categories_key, _CATEGORY_LIST, categories)
