"""Google Sheets sink."""

from gmailrelay.infrastructure.sheets.client import GoogleSheetsSink

__all__ = ["GoogleSheetsSink"]
