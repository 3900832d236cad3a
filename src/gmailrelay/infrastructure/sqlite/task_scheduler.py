"""One-shot task scheduler persisted in SQLite and polled by the scheduler worker."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from loguru import logger

from gmailrelay.application.ports.scheduler import TaskScheduler
from gmailrelay.domain.models import ScheduledTask
from gmailrelay.infrastructure.sqlite.client import SQLiteClient


def _utc(dt: datetime) -> datetime:
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)


class SQLiteTaskScheduler(TaskScheduler):
    """Rows in ``scheduled_tasks``; run_at stored as UTC ISO-8601 so it sorts as text."""

    def __init__(self, client: SQLiteClient):
        self.client = client

    def schedule_at(
        self,
        run_at: datetime,
        task_id: str,
        task: str,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> ScheduledTask:
        scheduled = ScheduledTask(task_id=task_id, task=task, run_at=_utc(run_at), payload=dict(payload or {}))
        with self.client.connection() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO scheduled_tasks (task_id, task, run_at, payload_json)
                   VALUES (?, ?, ?, ?)""",
                (
                    scheduled.task_id,
                    scheduled.task,
                    scheduled.run_at.isoformat(timespec="microseconds"),
                    json.dumps(scheduled.payload),
                ),
            )
        logger.debug(f"Scheduled {task} as {task_id} at {scheduled.run_at.isoformat()}")
        return scheduled

    def cancel(self, task_id: str) -> bool:
        with self.client.connection() as conn:
            deleted = conn.execute("DELETE FROM scheduled_tasks WHERE task_id = ?", (task_id,)).rowcount
        return deleted > 0

    def cancel_task(self, task: str) -> int:
        with self.client.connection() as conn:
            return conn.execute("DELETE FROM scheduled_tasks WHERE task = ?", (task,)).rowcount

    def pending(self, task: Optional[str] = None) -> list[ScheduledTask]:
        query = "SELECT * FROM scheduled_tasks"
        params: tuple = ()
        if task is not None:
            query += " WHERE task = ?"
            params = (task,)
        with self.client.connection() as conn:
            rows = conn.execute(query + " ORDER BY run_at", params).fetchall()
        return [self._row_to_task(row) for row in rows]

    def due(self, now: datetime) -> list[ScheduledTask]:
        with self.client.connection() as conn:
            rows = conn.execute(
                "SELECT * FROM scheduled_tasks WHERE run_at <= ? ORDER BY run_at",
                (_utc(now).isoformat(timespec="microseconds"),),
            ).fetchall()
        return [self._row_to_task(row) for row in rows]

    @staticmethod
    def _row_to_task(row) -> ScheduledTask:
        return ScheduledTask(
            task_id=row["task_id"],
            task=row["task"],
            run_at=datetime.fromisoformat(row["run_at"]),
            payload=json.loads(row["payload_json"] or "{}"),
        )
