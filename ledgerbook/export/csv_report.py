"""
CSV report export.

One header row and one row per transaction, in the book's stored order.
The export is always the whole book; filters shown on screen do not apply.

Known limitation: Category and Description are wrapped in double quotes
but embedded quote characters are left as they are, so a description
containing '"' yields a malformed field. Set escape_quotes to double them
(RFC 4180) instead.
"""

import re
from datetime import datetime
from typing import Optional

from ledgerbook.config.settings import ExportSettings
from ledgerbook.models.ledger import Book, ExportDocument, Transaction


_WHITESPACE = re.compile(r"\s+")

HEADERS = ["Date", "Time", "Type", "Category", "Description", "Amount"]


def report_filename(book_name: str) -> str:
    """'Oct 2024' -> 'Oct_2024_Report.csv'."""
    return f"{_WHITESPACE.sub('_', book_name)}_Report.csv"


class CsvReportFormatter:
    """Renders books as delimited text reports."""

    def __init__(self, settings: Optional[ExportSettings] = None):
        self._settings = settings or ExportSettings()

    def _quote(self, value: str) -> str:
        if self._settings.escape_quotes:
            value = value.replace('"', '""')
        return f'"{value}"'

    def _local(self, moment: datetime) -> datetime:
        # Aware timestamps are shown in the machine's local zone
        if moment.tzinfo is None:
            return moment
        return moment.astimezone()

    def format_row(self, txn: Transaction) -> str:
        when = self._local(txn.date)
        return ",".join([
            when.strftime(self._settings.date_format),
            when.strftime(self._settings.time_format),
            txn.type.value,
            self._quote(txn.category),
            self._quote(txn.description),
            f"{txn.amount:.2f}",
        ])

    def render(self, book: Book) -> str:
        lines = [",".join(HEADERS)]
        lines.extend(self.format_row(txn) for txn in book.transactions)
        return "\n".join(lines)

    def export(self, book: Book) -> ExportDocument:
        return ExportDocument(
            filename=report_filename(book.name),
            content=self.render(book),
        )
