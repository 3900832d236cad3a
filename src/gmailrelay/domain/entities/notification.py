from __future__ import annotations
from dataclasses import dataclass

from gmailrelay.domain.entities.cursor import Cursor


@dataclass(frozen=True)
class Notification:
    """A decoded Gmail push: whose mailbox changed and the history id it reported."""

    origin_identity: str
    cursor: Cursor
