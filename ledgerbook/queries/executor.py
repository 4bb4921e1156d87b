"""
Query Execution Engine

DESIGN DECISION: Query execution is a pure function of
(book snapshot, filter spec, current time). Nothing here writes to the
store, and with a fixed "now" the result is fully deterministic.

Pipeline:
1. Sort all transactions newest first
2. Keep those matching every predicate (time, type, category, search)
3. Total the kept set (the totals describe the slice, not the whole book)
4. Group the kept set by calendar day for display
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from ledgerbook.audit.logger import AuditLogger
from ledgerbook.models.audit import AuditEventBuilder
from ledgerbook.models.ledger import (
    ALL_CATEGORIES,
    Book,
    Category,
    CategoryScope,
    FilterSpec,
    QueryResult,
    TimeFilter,
    Totals,
    Transaction,
    TransactionType,
    TypeFilter,
)


DEFAULT_GROUP_LABEL_FORMAT = "%a, %d %b %Y"


def local_time(moment: datetime, now: datetime) -> datetime:
    """
    Express `moment` in the timezone "now" is evaluated in.

    Naive timestamps are taken as already being local wall-clock time.
    """
    if moment.tzinfo is None:
        return moment
    if now.tzinfo is None:
        return moment.astimezone().replace(tzinfo=None)
    return moment.astimezone(now.tzinfo)


def sort_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort by date descending. Ties keep their stored order."""
    return sorted(transactions, key=lambda t: t.date.timestamp(), reverse=True)


def matches_time(txn: Transaction, time_filter: TimeFilter, now: datetime) -> bool:
    if time_filter == TimeFilter.ALL:
        return True
    when = local_time(txn.date, now)
    if time_filter == TimeFilter.TODAY:
        return when.date() == now.date()
    if time_filter == TimeFilter.THIS_MONTH:
        return (when.year, when.month) == (now.year, now.month)
    return True


def matches_filter(txn: Transaction, spec: FilterSpec, now: datetime) -> bool:
    """True iff the transaction passes every predicate of the spec."""
    if not matches_time(txn, spec.time, now):
        return False

    if spec.type != TypeFilter.ALL and txn.type.value != spec.type.value:
        return False

    # Exact, case-sensitive
    if spec.category != ALL_CATEGORIES and txn.category != spec.category:
        return False

    if spec.search:
        needle = spec.search.lower()
        if needle not in txn.category.lower() and needle not in txn.description.lower():
            return False

    return True


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    """Sum incoming and outgoing amounts; balance is in minus out."""
    total_in = Decimal("0")
    total_out = Decimal("0")
    for txn in transactions:
        if txn.type == TransactionType.IN:
            total_in += txn.amount
        else:
            total_out += txn.amount
    return Totals(total_in=total_in, total_out=total_out, balance=total_in - total_out)


def group_by_day(
    transactions: list[Transaction],
    now: datetime,
    label_format: str = DEFAULT_GROUP_LABEL_FORMAT,
) -> dict[str, list[Transaction]]:
    """
    Group already-sorted transactions under a day label.

    Group order follows the first appearance of each day, so newest-first
    input gives newest-first groups.
    """
    grouped: dict[str, list[Transaction]] = {}
    for txn in transactions:
        label = local_time(txn.date, now).strftime(label_format)
        grouped.setdefault(label, []).append(txn)
    return grouped


def book_balance(book: Book) -> Decimal:
    """Net balance of the whole, unfiltered book."""
    return compute_totals(book.transactions).balance


def categories_for(
    categories: Iterable[Category],
    transaction_type: TransactionType,
) -> list[Category]:
    """Categories offered for a transaction type: its own scope plus BOTH."""
    scope = CategoryScope(transaction_type.value)
    return [
        c for c in categories
        if c.applies_to in (scope, CategoryScope.BOTH)
    ]


def query_transactions(
    book: Book,
    spec: Optional[FilterSpec] = None,
    now: Optional[datetime] = None,
    label_format: str = DEFAULT_GROUP_LABEL_FORMAT,
) -> QueryResult:
    """Run a filter spec against a book. See module docstring for the steps."""
    spec = spec or FilterSpec()
    now = now or datetime.now().astimezone()

    kept = [
        txn for txn in sort_newest_first(book.transactions)
        if matches_filter(txn, spec, now)
    ]

    return QueryResult(
        book_id=book.id,
        filter=spec,
        evaluated_at=now,
        transactions=kept,
        grouped=group_by_day(kept, now, label_format),
        totals=compute_totals(kept),
    )


class QueryExecutor:
    """
    Executes filter specs against book snapshots.

    Thin stateful wrapper around query_transactions that carries the
    display configuration and reports each query to the audit log.
    """

    def __init__(
        self,
        label_format: str = DEFAULT_GROUP_LABEL_FORMAT,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._label_format = label_format
        self._audit = audit_logger

    def execute(
        self,
        book: Book,
        spec: Optional[FilterSpec] = None,
        now: Optional[datetime] = None,
    ) -> QueryResult:
        result = query_transactions(book, spec, now, self._label_format)

        if self._audit:
            self._audit.log(
                AuditEventBuilder.query_executed(
                    book.id,
                    result.result_count,
                    result.filter.model_dump(mode="json"),
                )
            )

        return result
