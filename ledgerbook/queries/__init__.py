"""Query execution package."""

from ledgerbook.queries.executor import (
    QueryExecutor,
    book_balance,
    categories_for,
    compute_totals,
    query_transactions,
)

__all__ = [
    "QueryExecutor",
    "book_balance",
    "categories_for",
    "compute_totals",
    "query_transactions",
]
