from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Protocol

from gmailrelay.domain.entities.cursor import Cursor
from gmailrelay.domain.entities.record import ChangeRecord, Record


@dataclass(frozen=True)
class HistoryPage:
    changes: list[ChangeRecord] = field(default_factory=list)
    # historyId reported by the API for this page, if any
    history_id: Optional[str] = None
    next_page_token: Optional[str] = None


class ChangeLog(Protocol):
    def list_history(self, start: Cursor, page_token: Optional[str] = None) -> HistoryPage:
        """Raise FetchError if the listing call fails."""
        ...

    def get_message(self, message_id: str) -> Record:
        """Raise ItemResolveError if the message is gone or unreadable."""
        ...
