"""Report export package."""

from ledgerbook.export.csv_report import CsvReportFormatter, report_filename

__all__ = ["CsvReportFormatter", "report_filename"]
