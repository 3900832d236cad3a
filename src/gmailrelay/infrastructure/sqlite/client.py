"""SQLite client for relay state and scheduled tasks."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from loguru import logger

from gmailrelay.domain.errors import StorageError


class SQLiteClient:
    """Owns the database file and schema; hands out short-lived connections."""

    def __init__(self, db_path: str | Path = "data/relay_state.db"):
        self.db_path = Path(db_path)
        self._ensure_db()

    def _ensure_db(self) -> None:
        """Create database and tables if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self.connection() as conn:
            conn.executescript("""
                PRAGMA journal_mode=WAL;

                CREATE TABLE IF NOT EXISTS relay_state (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS scheduled_tasks (
                    task_id TEXT PRIMARY KEY,
                    task TEXT NOT NULL,
                    run_at TEXT NOT NULL,
                    payload_json TEXT NOT NULL DEFAULT '{}'
                );

                CREATE INDEX IF NOT EXISTS idx_scheduled_tasks_run_at
                    ON scheduled_tasks(run_at);
            """)
            logger.info(f"SQLite database initialized at {self.db_path}")

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Context manager for database connections; sqlite errors become StorageError."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(str(e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


_sqlite_client: SQLiteClient | None = None


def get_sqlite_client() -> SQLiteClient:
    """Get singleton SQLite client for the configured path."""
    global _sqlite_client
    if _sqlite_client is None:
        from gmailrelay.infrastructure.settings import get_settings

        _sqlite_client = SQLiteClient(get_settings().sqlite_path)
    return _sqlite_client
