"""
End-to-end tests through the engine facade.

These follow a user through the app: create a book, record entries,
filter them, export, delete.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ledgerbook.config import get_settings
from ledgerbook.engine import build_kv_store, create_ledger_engine
from ledgerbook.models.audit import AuditEventType
from ledgerbook.models.ledger import (
    FilterSpec,
    TransactionDraft,
    TransactionType,
    TypeFilter,
)
from ledgerbook.services.storage import InMemoryKeyValueStore, JsonFileKeyValueStore


T1 = datetime(2024, 10, 1, 9, 0, tzinfo=timezone.utc)
T2 = datetime(2024, 10, 2, 13, 0, tzinfo=timezone.utc)
NOW = datetime(2024, 10, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def october(engine):
    """Book with one salary and one food entry."""
    book = engine.create_book("Oct 2024")
    engine.record_transaction(book.id, TransactionDraft(
        amount=Decimal("500"), category="Salary", type=TransactionType.IN, date=T1,
    ))
    engine.record_transaction(book.id, TransactionDraft(
        amount=Decimal("120"), category="Food", type=TransactionType.OUT, date=T2,
    ))
    return engine.get_book(book.id)


class TestScenarios:
    """The reference scenarios of the ledger."""

    def test_empty_store_has_default_categories(self, engine):
        """Test scenario 1: defaults on an empty store."""
        categories = engine.list_categories()
        assert len(categories) == 10
        assert categories[0].name == "Food"

    def test_totals_for_all(self, engine, october):
        """Test scenario 2: in 500, out 120, balance 380."""
        totals = engine.query_transactions(october, FilterSpec(), NOW).totals
        assert totals.total_in == Decimal("500")
        assert totals.total_out == Decimal("120")
        assert totals.balance == Decimal("380")

    def test_income_only(self, engine, october):
        """Test scenario 3: filtering to IN leaves the salary alone."""
        result = engine.query_transactions(october, FilterSpec(type=TypeFilter.IN), NOW)
        assert [t.category for t in result.transactions] == ["Salary"]
        assert result.totals.total_out == Decimal("0")

    def test_delete_book(self, engine, october, kv_store):
        """Test scenario 4: a deleted book and its entries are gone."""
        engine.delete_book(october.id)

        assert october.id not in [b.id for b in engine.list_books()]
        assert engine.get_book(october.id) is None

        reloaded = create_ledger_engine(kv_store=kv_store)
        assert reloaded.list_books() == []

    def test_export(self, engine):
        """Test scenario 5: quoted text fields and a two-decimal amount."""
        book = engine.create_book("Oct 2024")
        book, _ = engine.record_transaction(book.id, TransactionDraft(
            amount=Decimal("45.5"),
            category="Food",
            description="lunch, fries",
            type=TransactionType.OUT,
            date=T2,
        ))

        document = engine.export_book(book)

        row = document.content.split("\n")[1]
        assert row.endswith(',OUT,"Food","lunch, fries",45.50')
        assert document.filename == "Oct_2024_Report.csv"


class TestTransactionFlow:
    """Tests for validated transaction entry."""

    def test_record_assigns_unique_ids(self, october):
        """Test that recorded transactions get distinct ids."""
        ids = [t.id for t in october.transactions]
        assert len(ids) == len(set(ids)) == 2

    def test_record_rejects_invalid_draft(self, engine, october, audit_storage):
        """Test that an invalid draft leaves the book untouched."""
        updated, result = engine.record_transaction(
            october.id, TransactionDraft(amount=Decimal("0"), category="Food"),
        )

        assert updated is None
        assert result.has_errors
        assert len(engine.get_book(october.id).transactions) == 2
        assert audit_storage.get_events_by_type(AuditEventType.VALIDATION_FAILED)

    def test_record_into_unknown_book(self, engine):
        """Test that recording into a missing book is a no-op."""
        updated, result = engine.record_transaction(
            "missing", TransactionDraft(amount=Decimal("1"), category="Food"),
        )
        assert updated is None
        assert result.is_valid

    def test_record_without_date_uses_now(self, engine):
        """Test that a missing date becomes the given now."""
        book = engine.create_book("B")
        updated, _ = engine.record_transaction(
            book.id, TransactionDraft(amount=Decimal("1"), category="Food"), now=NOW,
        )
        assert updated.transactions[0].date == NOW

    def test_edit_transaction(self, engine, october):
        """Test that an edit replaces the entry in place and keeps its id."""
        target = october.transactions[1]
        updated, result = engine.edit_transaction(
            october.id,
            target.id,
            TransactionDraft(
                amount=Decimal("80"), category="Transport",
                type=TransactionType.OUT, date=T2,
            ),
        )

        assert result.is_valid
        assert updated.transactions[1].id == target.id
        assert engine.get_book(october.id).transactions[1].category == "Transport"

    def test_edit_unknown_transaction(self, engine, october):
        """Test that editing a missing transaction changes nothing."""
        updated, _ = engine.edit_transaction(
            october.id, "missing",
            TransactionDraft(amount=Decimal("1"), category="Food"),
        )
        assert updated is None
        assert engine.get_book(october.id) == october

    def test_delete_transaction(self, engine, october, audit_storage):
        """Test removal of a single entry."""
        target = october.transactions[0]
        updated = engine.delete_transaction(october.id, target.id)

        assert target.id not in [t.id for t in updated.transactions]
        assert len(engine.get_book(october.id).transactions) == 1
        events = audit_storage.get_events_by_type(AuditEventType.TRANSACTION_DELETED)
        assert events[0].entity_id == target.id

    def test_delete_unknown_transaction(self, engine, october):
        """Test that deleting a missing transaction returns None."""
        assert engine.delete_transaction(october.id, "missing") is None
        assert engine.delete_transaction("missing", "missing") is None

    def test_changes_survive_reload(self, october, kv_store):
        """Test that every mutation was saved back to the key-value store."""
        reloaded = create_ledger_engine(kv_store=kv_store)
        assert reloaded.get_book(october.id) == october


class TestFacadeExtras:
    """Tests for the convenience calls of the facade."""

    def test_categories_for(self, engine):
        """Test that user categories are offered for both types."""
        engine.add_category("Pets")
        income = [c.name for c in engine.categories_for(TransactionType.IN)]
        expense = [c.name for c in engine.categories_for(TransactionType.OUT)]
        assert "Pets" in income
        assert "Pets" in expense

    def test_add_duplicate_category(self, engine):
        """Test that the facade passes duplicates through as None."""
        assert engine.add_category("food") is None

    def test_book_balance(self, engine, october):
        """Test the whole-book net balance."""
        assert engine.book_balance(october) == Decimal("380")

    def test_suggest_book_name(self, engine):
        """Test the suggested name for a new book."""
        assert engine.suggest_book_name(datetime(2024, 10, 5)) == "October 2024"

    def test_export_is_audited(self, engine, october, audit_storage):
        """Test that exports are recorded."""
        engine.export_book(october)
        events = audit_storage.get_events_by_type(AuditEventType.BOOK_EXPORTED)
        assert events[0].details["row_count"] == 2


class TestNameValidation:
    """Tests for book and category names entered through the facade."""

    def test_blank_book_name_is_rejected(self, engine, audit_storage):
        """Test that a blank book name creates nothing and is audited."""
        assert engine.create_book("   ") is None
        assert engine.list_books() == []
        events = audit_storage.get_events_by_type(AuditEventType.VALIDATION_FAILED)
        assert events[0].details["fields"] == ["name"]

    def test_book_name_is_trimmed(self, engine):
        """Test that surrounding whitespace is dropped from a new book name."""
        assert engine.create_book("  Oct 2024 ").name == "Oct 2024"

    def test_blank_category_is_rejected(self, engine):
        """Test that a blank category name adds nothing."""
        assert engine.add_category("  ") is None
        assert len(engine.list_categories()) == 10

    def test_duplicate_category_is_audited(self, engine, audit_storage):
        """Test that a duplicate name is reported as a validation failure."""
        engine.add_category(" FOOD ")
        assert audit_storage.get_events_by_type(AuditEventType.VALIDATION_FAILED)

    def test_long_names_are_accepted(self, engine, kv_store):
        """Test that names have no upper length limit."""
        book = engine.create_book("N" * 201)
        category = engine.add_category("C" * 101)

        assert book is not None
        assert category is not None

        reloaded = create_ledger_engine(kv_store=kv_store)
        assert reloaded.get_book(book.id).name == "N" * 201
        assert reloaded.list_categories()[-1].name == "C" * 101


class TestStoredPayloads:
    """Tests that data written by the earlier browser app loads and survives edits."""

    @pytest.fixture
    def legacy_store(self) -> InMemoryKeyValueStore:
        books = [
            {
                "id": "lz1k2m3n4o",
                "name": "Short",
                "createdAt": "2024-10-01T08:00:00.000Z",
                "transactions": [
                    {
                        "id": "lz1k2m9xyz",
                        "amount": 12.5,
                        "category": "Food ",
                        "date": "2024-10-02T13:00:00.000Z",
                        "type": "OUT",
                    },
                ],
            },
            {
                "id": "lz1k2mabcd",
                "name": "N" * 201,
                "createdAt": "2024-09-01T08:00:00.000Z",
                "transactions": [],
            },
        ]
        categories = [
            {"id": "1", "name": "Food", "type": "OUT"},
            {"id": "3", "name": "Salary", "type": "IN"},
            {"id": "lz1k2mpets", "name": "Pets", "type": "BOTH"},
        ]
        return InMemoryKeyValueStore({
            "app-books-v1": json.dumps(books),
            "app-categories-v1": json.dumps(categories),
        })

    def test_load_then_mutate_keeps_existing_books(self, legacy_store):
        """Test that creating a book after loading keeps every stored book."""
        engine = create_ledger_engine(kv_store=legacy_store)
        engine.create_book("New")

        reloaded = create_ledger_engine(kv_store=legacy_store)
        assert [b.name for b in reloaded.list_books()] == ["New", "Short", "N" * 201]

        short = reloaded.get_book("lz1k2m3n4o")
        assert short.transactions[0].description == ""
        assert short.transactions[0].amount == Decimal("12.5")
        assert short.created_at == datetime(2024, 10, 1, 8, 0, tzinfo=timezone.utc)

    def test_stored_category_text_is_kept_verbatim(self, legacy_store):
        """Test that an exact filter on the stored category still matches."""
        engine = create_ledger_engine(kv_store=legacy_store)
        book = engine.get_book("lz1k2m3n4o")

        result = engine.query_transactions(book, FilterSpec(category="Food "), NOW)
        assert result.result_count == 1

    def test_legacy_categories_survive_a_save(self, legacy_store):
        """Test that old 'type' scopes are written back as 'appliesTo'."""
        engine = create_ledger_engine(kv_store=legacy_store)
        engine.add_category("Gifts")

        stored = json.loads(legacy_store.get("app-categories-v1"))
        assert [c["name"] for c in stored] == ["Food", "Salary", "Pets", "Gifts"]
        assert stored[1]["appliesTo"] == "IN"
        assert "type" not in stored[1]

class TestFactory:
    """Tests for wiring from configuration."""

    @pytest.fixture(autouse=True)
    def fresh_settings(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_memory_backend(self, monkeypatch):
        """Test that LEDGER_STORAGE_BACKEND=memory selects the in-memory store."""
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "memory")
        assert isinstance(build_kv_store(get_settings()), InMemoryKeyValueStore)

    def test_json_file_backend(self, monkeypatch, tmp_path):
        """Test that the file backend writes to the configured path."""
        path = tmp_path / "ledger.json"
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "json_file")
        monkeypatch.setenv("LEDGER_STORAGE_PATH", str(path))

        kv = build_kv_store(get_settings())
        assert isinstance(kv, JsonFileKeyValueStore)

        engine = create_ledger_engine()
        book = engine.create_book("On disk")
        assert path.exists()
        assert create_ledger_engine().get_book(book.id) == book

    def test_custom_storage_keys(self, monkeypatch, kv_store):
        """Test that configured schema keys are used."""
        monkeypatch.setenv("LEDGER_STORAGE_BOOKS_KEY", "books-test")
        engine = create_ledger_engine(kv_store=kv_store)
        engine.create_book("B")
        assert kv_store.get("books-test") is not None
        assert kv_store.get("app-books-v1") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
