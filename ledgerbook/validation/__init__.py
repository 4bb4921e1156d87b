"""Validation package."""

from ledgerbook.validation.validator import LedgerValidator, draft_to_transaction

__all__ = ["LedgerValidator", "draft_to_transaction"]
