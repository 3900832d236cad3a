"""Unit tests for SQLite-backed state and scheduler."""

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from gmailrelay.domain.entities.cursor import Cursor
from gmailrelay.domain.errors import StorageError
from gmailrelay.infrastructure.sqlite import SQLiteClient, SQLiteCursorStore, SQLiteTaskScheduler


@pytest.fixture
def client(tmp_path: Path) -> SQLiteClient:
    return SQLiteClient(tmp_path / "state" / "relay.db")


@pytest.fixture
def store(client: SQLiteClient) -> SQLiteCursorStore:
    return SQLiteCursorStore(client)


# ============================================================================
# SQLiteCursorStore
# ============================================================================


class TestCursorStore:
    """Tests for cursor persistence."""

    def test_empty_store(self, store: SQLiteCursorStore) -> None:
        assert store.get_cursor() is None
        assert store.get_listening() is False

    def test_set_and_get(self, store: SQLiteCursorStore) -> None:
        assert store.set_cursor(Cursor("115")) == Cursor("115")
        assert store.get_cursor() == Cursor("115")

    def test_cursor_only_moves_forward(self, store: SQLiteCursorStore) -> None:
        store.set_cursor(Cursor("115"))

        assert store.set_cursor(Cursor("99")) == Cursor("115")
        assert store.set_cursor(Cursor("115")) == Cursor("115")
        assert store.set_cursor(Cursor("1000")) == Cursor("1000")
        assert store.get_cursor() == Cursor("1000")

    def test_numeric_not_lexical_comparison(self, store: SQLiteCursorStore) -> None:
        store.set_cursor(Cursor("9"))
        store.set_cursor(Cursor("10"))

        assert store.get_cursor() == Cursor("10")

    def test_clear_cursor_allows_fresh_start(self, store: SQLiteCursorStore) -> None:
        store.set_cursor(Cursor("500"))
        store.clear_cursor()

        assert store.get_cursor() is None
        store.set_cursor(Cursor("3"))
        assert store.get_cursor() == Cursor("3")

    def test_persists_across_instances(self, client: SQLiteClient) -> None:
        SQLiteCursorStore(client).set_cursor(Cursor("42"))

        assert SQLiteCursorStore(SQLiteClient(client.db_path)).get_cursor() == Cursor("42")

    def test_listening_and_deadline(self, store: SQLiteCursorStore) -> None:
        deadline = datetime(2024, 5, 8, 11, 0, tzinfo=timezone.utc)

        store.set_listening(True)
        store.set_renewal_deadline(deadline)
        state = store.get_subscription_state()

        assert state.is_active is True
        assert state.renewal_deadline == deadline

        store.set_listening(False)
        store.set_renewal_deadline(None)
        state = store.get_subscription_state()
        assert state.is_active is False
        assert state.renewal_deadline is None

    def test_storage_errors_are_wrapped(self, client: SQLiteClient) -> None:
        with client.connection() as conn:
            conn.execute("DROP TABLE relay_state")

        with pytest.raises(StorageError):
            SQLiteCursorStore(client).get_cursor()

    def test_connection_rolls_back_on_error(self, client: SQLiteClient) -> None:
        with pytest.raises(StorageError):
            with client.connection() as conn:
                conn.execute("INSERT INTO relay_state (key, value) VALUES ('a', '1')")
                raise sqlite3.OperationalError("simulated")

        with client.connection() as conn:
            assert conn.execute("SELECT COUNT(*) FROM relay_state").fetchone()[0] == 0


# ============================================================================
# SQLiteTaskScheduler
# ============================================================================


class TestTaskScheduler:
    """Tests for one-shot task persistence."""

    def test_schedule_and_due(self, client: SQLiteClient) -> None:
        scheduler = SQLiteTaskScheduler(client)
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

        scheduler.schedule_at(now - timedelta(minutes=1), "past", "startWatch", {"a": 1})
        scheduler.schedule_at(now + timedelta(hours=1), "future", "startWatch")

        due = scheduler.due(now)
        assert [t.task_id for t in due] == ["past"]
        assert due[0].payload == {"a": 1}
        assert due[0].run_at == now - timedelta(minutes=1)

    def test_cancel(self, client: SQLiteClient) -> None:
        scheduler = SQLiteTaskScheduler(client)
        scheduler.schedule_at(datetime.now(timezone.utc), "t1", "startWatch")

        assert scheduler.cancel("t1") is True
        assert scheduler.cancel("t1") is False
        assert scheduler.pending() == []

    def test_cancel_task_by_name(self, client: SQLiteClient) -> None:
        scheduler = SQLiteTaskScheduler(client)
        when = datetime.now(timezone.utc)
        scheduler.schedule_at(when, "a", "startWatch")
        scheduler.schedule_at(when, "b", "startWatch")
        scheduler.schedule_at(when, "c", "other")

        assert scheduler.cancel_task("startWatch") == 2
        assert [t.task_id for t in scheduler.pending()] == ["c"]

    def test_naive_datetimes_treated_as_utc(self, client: SQLiteClient) -> None:
        scheduler = SQLiteTaskScheduler(client)
        scheduler.schedule_at(datetime(2024, 5, 1, 12, 0), "naive", "startWatch")

        assert scheduler.pending("startWatch")[0].run_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_reschedule_same_id_replaces(self, client: SQLiteClient) -> None:
        scheduler = SQLiteTaskScheduler(client)
        t0 = datetime(2024, 5, 1, tzinfo=timezone.utc)
        scheduler.schedule_at(t0, "x", "startWatch")
        scheduler.schedule_at(t0 + timedelta(minutes=5), "x", "startWatch")

        pending = scheduler.pending()
        assert len(pending) == 1
        assert pending[0].run_at == t0 + timedelta(minutes=5)
