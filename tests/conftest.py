"""
Shared fixtures.

Everything runs against in-memory storage; no test touches the real
filesystem except through tmp_path.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ledgerbook.audit import AuditLogger
from ledgerbook.engine import LedgerEngine, create_ledger_engine
from ledgerbook.models.ledger import Book, Transaction, TransactionType
from ledgerbook.services.persistence import PersistenceAdapter
from ledgerbook.services.storage import InMemoryAuditStorage, InMemoryKeyValueStore
from ledgerbook.store import LedgerStore


NOW = datetime(2024, 10, 14, 12, 0, tzinfo=timezone.utc)


def make_transaction(
    txn_id: str,
    amount,
    category: str,
    txn_type: TransactionType,
    when: datetime,
    description: str = "",
) -> Transaction:
    return Transaction(
        id=txn_id,
        amount=Decimal(str(amount)),
        category=category,
        description=description,
        date=when,
        type=txn_type,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage) -> AuditLogger:
    return AuditLogger(audit_storage)


@pytest.fixture
def persistence(kv_store, audit_logger) -> PersistenceAdapter:
    return PersistenceAdapter(kv_store, audit_logger=audit_logger)


@pytest.fixture
def store(persistence, audit_logger) -> LedgerStore:
    return LedgerStore(persistence, audit_logger=audit_logger)


@pytest.fixture
def engine(kv_store, audit_storage) -> LedgerEngine:
    return create_ledger_engine(kv_store=kv_store, audit_storage=audit_storage)


@pytest.fixture
def sample_book() -> Book:
    """A book spanning two months, stored deliberately out of date order."""
    return Book(
        id="book-1",
        name="Oct 2024",
        created_at=datetime(2024, 10, 1, tzinfo=timezone.utc),
        transactions=[
            make_transaction(
                "t1", 120, "Food", TransactionType.OUT,
                datetime(2024, 10, 14, 9, 30, tzinfo=timezone.utc),
                "Lunch at cafe",
            ),
            make_transaction(
                "t2", 500, "Salary", TransactionType.IN,
                datetime(2024, 10, 1, 8, 0, tzinfo=timezone.utc),
                "October salary",
            ),
            make_transaction(
                "t3", 40, "Transport", TransactionType.OUT,
                datetime(2024, 10, 14, 18, 15, tzinfo=timezone.utc),
                "Taxi home",
            ),
            make_transaction(
                "t4", 75.5, "Food", TransactionType.OUT,
                datetime(2024, 9, 28, 20, 0, tzinfo=timezone.utc),
                "Groceries",
            ),
            make_transaction(
                "t5", 200, "Business", TransactionType.IN,
                datetime(2024, 10, 10, 11, 0, tzinfo=timezone.utc),
                "Freelance FOOD blog",
            ),
        ],
    )
