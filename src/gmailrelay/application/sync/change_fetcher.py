"""Incremental pull of added messages from the Gmail history log."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from gmailrelay.application.ports.change_log import ChangeLog
from gmailrelay.domain.entities.cursor import Cursor
from gmailrelay.domain.entities.record import Record
from gmailrelay.domain.errors import FetchError, ItemResolveError


@dataclass(frozen=True)
class FetchResult:
    records: list[Record] = field(default_factory=list)
    new_cursor: Cursor | None = None
    skipped: int = 0


class ChangeFetcher:
    """Pages history from a cursor to the present and resolves each added message.

    Flow:
    1. List history pages from ``from_cursor`` until no continuation token remains
    2. Resolve every added message id (each id once, in log order)
    3. Skip messages that can no longer be resolved
    4. Report the highest historyId seen across pages

    A failing listing call raises FetchError and nothing is returned, since it is
    unknown how much of the log was seen.
    """

    def __init__(self, change_log: ChangeLog, max_pages: int | None = None) -> None:
        self.change_log = change_log
        self.max_pages = max_pages

    def fetch(self, from_cursor: Cursor) -> FetchResult:
        new_cursor = from_cursor
        message_ids: list[str] = []
        seen: set[str] = set()
        page_token: str | None = None
        pages = 0

        while True:
            page = self.change_log.list_history(from_cursor, page_token)
            pages += 1

            if page.history_id:
                try:
                    new_cursor = max(new_cursor, Cursor(page.history_id))
                except ValueError as e:
                    raise FetchError(f"Upstream reported invalid historyId {page.history_id!r}") from e

            for change in page.changes:
                if change.message_id not in seen:
                    seen.add(change.message_id)
                    message_ids.append(change.message_id)

            page_token = page.next_page_token
            if not page_token:
                break
            if self.max_pages is not None and pages >= self.max_pages:
                raise FetchError(f"History listing exceeded {self.max_pages} pages")

        logger.debug(f"History from {from_cursor}: {pages} page(s), {len(message_ids)} added message(s)")

        records: list[Record] = []
        skipped = 0
        for message_id in message_ids:
            try:
                records.append(self.change_log.get_message(message_id))
            except ItemResolveError as e:
                skipped += 1
                logger.warning(f"Skipping message {message_id}: {e}")

        if skipped:
            logger.info(f"Resolved {len(records)} message(s), skipped {skipped}")

        return FetchResult(records=records, new_cursor=new_cursor, skipped=skipped)
