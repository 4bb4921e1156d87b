"""
Ledgerbook - Source Package

A personal ledger engine: named books of income and expense entries,
with filtering, totals, CSV export and key-value persistence.

DESIGN PRINCIPLES:
1. One writer: only the LedgerStore mutates books and categories
2. Whole-book replace is the only way transactions change
3. Persistence failures are absorbed and audited, never raised
4. Validation happens at the boundary, not in the store
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Ledgerbook Team"
