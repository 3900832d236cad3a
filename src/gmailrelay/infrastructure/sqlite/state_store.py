"""SQLite-backed CursorStore."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from loguru import logger

from gmailrelay.application.ports.cursor_store import CursorStore
from gmailrelay.domain.entities.cursor import Cursor
from gmailrelay.domain.models import SubscriptionState
from gmailrelay.infrastructure.sqlite.client import SQLiteClient

CURSOR_KEY = "history_cursor"
LISTENING_KEY = "listening"
DEADLINE_KEY = "renewal_deadline"

# Forward-only upsert: an older historyId never replaces a newer one
_ADVANCE_CURSOR_SQL = """
    INSERT INTO relay_state (key, value, updated_at)
    VALUES (?, ?, CURRENT_TIMESTAMP)
    ON CONFLICT(key) DO UPDATE SET
        value = excluded.value,
        updated_at = excluded.updated_at
    WHERE CAST(excluded.value AS INTEGER) > CAST(relay_state.value AS INTEGER)
"""

_PUT_SQL = """
    INSERT INTO relay_state (key, value, updated_at)
    VALUES (?, ?, CURRENT_TIMESTAMP)
    ON CONFLICT(key) DO UPDATE SET
        value = excluded.value,
        updated_at = excluded.updated_at
"""


class SQLiteCursorStore(CursorStore):
    """Cursor, listening flag and renewal deadline in the ``relay_state`` table."""

    def __init__(self, client: SQLiteClient):
        self.client = client

    def _get(self, key: str) -> Optional[str]:
        with self.client.connection() as conn:
            row = conn.execute("SELECT value FROM relay_state WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def _put(self, key: str, value: str) -> None:
        with self.client.connection() as conn:
            conn.execute(_PUT_SQL, (key, value))

    def _delete(self, key: str) -> None:
        with self.client.connection() as conn:
            conn.execute("DELETE FROM relay_state WHERE key = ?", (key,))

    def get_cursor(self) -> Optional[Cursor]:
        value = self._get(CURSOR_KEY)
        return Cursor(value) if value is not None else None

    def set_cursor(self, cursor: Cursor) -> Cursor:
        """Advance the cursor to ``max(stored, cursor)``; returns the stored value."""
        with self.client.connection() as conn:
            changed = conn.execute(_ADVANCE_CURSOR_SQL, (CURSOR_KEY, cursor.value)).rowcount
            row = conn.execute("SELECT value FROM relay_state WHERE key = ?", (CURSOR_KEY,)).fetchone()
        stored = Cursor(row["value"])
        if changed:
            logger.debug(f"Cursor advanced to {stored}")
        elif cursor < stored:
            logger.warning(f"Ignored stale cursor {cursor}; stored cursor is {stored}")
        return stored

    def clear_cursor(self) -> None:
        self._delete(CURSOR_KEY)
        logger.info("Cursor cleared")

    def get_listening(self) -> bool:
        return self._get(LISTENING_KEY) == "true"

    def set_listening(self, listening: bool) -> None:
        self._put(LISTENING_KEY, "true" if listening else "false")

    def get_subscription_state(self) -> SubscriptionState:
        deadline = self._get(DEADLINE_KEY)
        return SubscriptionState(
            is_active=self.get_listening(),
            renewal_deadline=datetime.fromisoformat(deadline) if deadline else None,
        )

    def set_renewal_deadline(self, deadline: Optional[datetime]) -> None:
        if deadline is None:
            self._delete(DEADLINE_KEY)
        else:
            self._put(DEADLINE_KEY, deadline.isoformat())
