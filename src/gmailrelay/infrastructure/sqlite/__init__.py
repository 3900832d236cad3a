"""SQLite infrastructure for relay state and scheduled tasks."""

from gmailrelay.infrastructure.sqlite.client import SQLiteClient, get_sqlite_client
from gmailrelay.infrastructure.sqlite.state_store import SQLiteCursorStore
from gmailrelay.infrastructure.sqlite.task_scheduler import SQLiteTaskScheduler

__all__ = [
    "SQLiteClient",
    "SQLiteCursorStore",
    "SQLiteTaskScheduler",
    "get_sqlite_client",
]
