"""Google Sheets row sink."""

from __future__ import annotations

from typing import Sequence

from googleapiclient.errors import HttpError
from loguru import logger

from gmailrelay.application.ports.sink import RowSink
from gmailrelay.application.sync.layout import column_letters
from gmailrelay.domain.errors import WriteError
from gmailrelay.infrastructure.gmail.client import TRANSPORT_ERRORS


def _quote(sheet: str) -> str:
    return "'" + sheet.replace("'", "''") + "'"


class GoogleSheetsSink(RowSink):
    """Rows of one spreadsheet; ``sink_name`` is the sheet (tab) title."""

    def __init__(self, service_factory, spreadsheet_id: str) -> None:
        self.service_factory = service_factory
        self.spreadsheet_id = spreadsheet_id

    def last_row(self, sink_name: str) -> int:
        try:
            resp = (
                self.service_factory()
                .spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=_quote(sink_name), majorDimension="ROWS")
                .execute()
            )
        except (HttpError, *TRANSPORT_ERRORS) as e:
            raise WriteError(f"Could not read length of {sink_name}: {e}") from e

        # values.get trims trailing empty rows, so the count is the last used row
        return len(resp.get("values") or [])

    def write_rows(self, sink_name: str, start_row: int, rows: Sequence[Sequence[str]]) -> None:
        if not rows:
            return
        width = max(len(r) for r in rows)
        end_row = start_row + len(rows) - 1
        target = f"{_quote(sink_name)}!A{start_row}:{column_letters(width)}{end_row}"
        try:
            (
                self.service_factory()
                .spreadsheets()
                .values()
                .update(
                    spreadsheetId=self.spreadsheet_id,
                    range=target,
                    valueInputOption="USER_ENTERED",
                    body={"range": target, "majorDimension": "ROWS", "values": [list(r) for r in rows]},
                )
                .execute()
            )
        except (HttpError, *TRANSPORT_ERRORS) as e:
            raise WriteError(f"Write to {target} failed: {e}") from e
        logger.debug(f"Wrote {len(rows)} row(s) to {target}")
