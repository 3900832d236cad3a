from __future__ import annotations
from datetime import datetime
from typing import Optional, Protocol

from gmailrelay.domain.entities.cursor import Cursor
from gmailrelay.domain.models import SubscriptionState


class CursorStore(Protocol):
    def get_cursor(self) -> Optional[Cursor]: ...
    def set_cursor(self, cursor: Cursor) -> Cursor: ...
    def clear_cursor(self) -> None: ...
    def get_listening(self) -> bool: ...
    def set_listening(self, listening: bool) -> None: ...
    def get_subscription_state(self) -> SubscriptionState: ...
    def set_renewal_deadline(self, deadline: Optional[datetime]) -> None: ...
