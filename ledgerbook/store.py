"""
Ledger Store

Owns the canonical in-memory collections of books and categories.

DESIGN DECISION: Exactly one entry point mutates book state:
update_book replaces a whole book. Adding, editing or removing a
transaction means building a new book (see the helpers at the bottom)
and handing it to update_book. Invariants are therefore checked at a
single choke point.

Other rules:
- Every mutation is written back through the PersistenceAdapter
- Unknown ids are silent no-ops, so repeating a delete is harmless
- Readers get deep copies; only the store writes its own collections
- No validation happens here; input is checked at the boundary
"""

from datetime import datetime, timezone
from typing import Optional

from ledgerbook.audit.logger import AuditLogger
from ledgerbook.models.audit import AuditEventBuilder
from ledgerbook.models.ledger import Book, Category, CategoryScope, Transaction
from ledgerbook.services.ids import generate_id
from ledgerbook.services.persistence import PersistenceAdapter


class LedgerStore:
    """
    Single source of truth for books and categories.

    Constructed once at process start; state is loaded from the adapter
    immediately.
    """

    def __init__(
        self,
        persistence: PersistenceAdapter,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._persistence = persistence
        self._audit = audit_logger or AuditLogger()
        self._books: list[Book] = persistence.load_books()
        self._categories: list[Category] = persistence.load_categories()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_books(self) -> list[Book]:
        """Snapshot of all books, most recently created first by default."""
        return [book.model_copy(deep=True) for book in self._books]

    def get_book(self, book_id: str) -> Optional[Book]:
        for book in self._books:
            if book.id == book_id:
                return book.model_copy(deep=True)
        return None

    def list_categories(self) -> list[Category]:
        return [category.model_copy(deep=True) for category in self._categories]

    def find_category(self, name: str) -> Optional[Category]:
        """Case-insensitive lookup by name."""
        for category in self._categories:
            if category.matches_name(name):
                return category.model_copy(deep=True)
        return None

    # ------------------------------------------------------------------
    # Book mutations
    # ------------------------------------------------------------------

    def create_book(self, name: str, now: Optional[datetime] = None) -> Book:
        """Create an empty book and put it at the front of the collection."""
        book = Book(
            id=generate_id(),
            name=name,
            created_at=now or datetime.now(timezone.utc),
            transactions=[],
        )
        self._books.insert(0, book)
        self._persistence.save_books(self._books)
        self._audit.log(AuditEventBuilder.book_created(book.id, book.name))
        return book.model_copy(deep=True)

    def update_book(self, book: Book) -> None:
        """Replace the stored book with the same id. No-op if unknown."""
        for idx, existing in enumerate(self._books):
            if existing.id == book.id:
                self._books[idx] = book.model_copy(deep=True)
                self._persistence.save_books(self._books)
                self._audit.log(
                    AuditEventBuilder.book_updated(book.id, len(book.transactions))
                )
                return

        self._audit.log(AuditEventBuilder.book_not_found(book.id, "update_book"))

    def delete_book(self, book_id: str) -> None:
        """Remove a book and, with it, all of its transactions. No-op if unknown."""
        for idx, existing in enumerate(self._books):
            if existing.id == book_id:
                del self._books[idx]
                self._persistence.save_books(self._books)
                self._audit.log(
                    AuditEventBuilder.book_deleted(book_id, len(existing.transactions))
                )
                return

        self._audit.log(AuditEventBuilder.book_not_found(book_id, "delete_book"))

    # ------------------------------------------------------------------
    # Category mutations
    # ------------------------------------------------------------------

    def add_category(self, name: str) -> Optional[Category]:
        """
        Append a user category usable for both income and expense.

        Returns None, changing nothing, if the name already exists
        (case-insensitive).
        """
        for existing in self._categories:
            if existing.matches_name(name):
                self._audit.log(
                    AuditEventBuilder.category_duplicate_ignored(name, existing.id)
                )
                return None

        category = Category(
            id=generate_id(),
            name=name,
            applies_to=CategoryScope.BOTH,
        )
        self._categories.append(category)
        self._persistence.save_categories(self._categories)
        self._audit.log(AuditEventBuilder.category_added(category.id, category.name))
        return category.model_copy(deep=True)


# ----------------------------------------------------------------------
# Whole-book transaction helpers
# ----------------------------------------------------------------------

def append_transaction(book: Book, transaction: Transaction) -> Book:
    """New book with the transaction added at the end."""
    updated = book.model_copy(deep=True)
    updated.transactions.append(transaction.model_copy(deep=True))
    return updated


def replace_transaction(book: Book, transaction_id: str, transaction: Transaction) -> Book:
    """
    New book with the matching transaction swapped out in place.

    The replacement keeps the original id.
    """
    updated = book.model_copy(deep=True)
    updated.transactions = [
        transaction.model_copy(update={"id": transaction_id}, deep=True)
        if txn.id == transaction_id else txn
        for txn in updated.transactions
    ]
    return updated


def remove_transaction(book: Book, transaction_id: str) -> Book:
    """New book without the matching transaction."""
    updated = book.model_copy(deep=True)
    updated.transactions = [
        txn for txn in updated.transactions if txn.id != transaction_id
    ]
    return updated


def default_book_name(now: Optional[datetime] = None) -> str:
    """Suggested name for a new book, e.g. 'October 2024'."""
    return (now or datetime.now()).strftime("%B %Y")
