"""Scheduler worker - runs due one-shot tasks (watch renewals) at a fixed poll interval."""

from __future__ import annotations

import signal
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from loguru import logger

from gmailrelay.application.ports.scheduler import TaskScheduler
from gmailrelay.application.use_cases import TaskDispatcher
from gmailrelay.domain.errors import StorageError
from gmailrelay.domain.models import RelayResult, RunState
from gmailrelay.infrastructure import build_task_dispatcher, get_settings
from gmailrelay.infrastructure.logging_setup import configure_logging
from gmailrelay.infrastructure.sqlite import SQLiteTaskScheduler, get_sqlite_client


@dataclass
class WorkerStats:
    """Track worker statistics."""
    polls_completed: int = 0
    tasks_run: int = 0
    tasks_failed: int = 0
    last_poll: datetime | None = None


class SchedulerWorker:
    """
    Polls the task table and dispatches every task whose time has come.

    A successful task is removed after running so it does not fire twice
    (``startWatch`` already deletes its own triggering task). A failed task is
    pushed back by ``retry_delay_seconds`` so a lapsed renewal is retried.
    """

    def __init__(
        self,
        scheduler: TaskScheduler,
        dispatcher: TaskDispatcher,
        poll_interval_seconds: int = 30,
        retry_delay_seconds: int = 300,
    ):
        self.scheduler = scheduler
        self.dispatcher = dispatcher
        self.poll_interval = poll_interval_seconds
        self.retry_delay = retry_delay_seconds
        self.running = False
        self.stats = WorkerStats()

    def run_due(self, now: datetime | None = None) -> int:
        """Run all due tasks once. Returns the number dispatched."""
        now = now or datetime.now(timezone.utc)
        self.stats.last_poll = now
        try:
            due = self.scheduler.due(now)
        except StorageError as e:
            logger.error(f"Could not read scheduled tasks: {e}")
            return 0

        for task in due:
            logger.info(f"Running scheduled task {task.task_id} ({task.task}), due {task.run_at.isoformat()}")
            try:
                result = self.dispatcher.dispatch(task.task, task.payload, task_id=task.task_id)
            except Exception as e:
                logger.exception(f"Scheduled task {task.task_id} raised: {e}")
                result = RelayResult(
                    success=False,
                    message=f"Task {task.task} raised {type(e).__name__}",
                    state=RunState.ABORTED,
                    error_reason=type(e).__name__,
                )
            self.stats.tasks_run += 1
            try:
                if result.success:
                    # No-op when the task already deleted itself
                    self.scheduler.cancel(task.task_id)
                else:
                    self.stats.tasks_failed += 1
                    retry_at = now + timedelta(seconds=self.retry_delay)
                    self.scheduler.schedule_at(retry_at, task.task_id, task.task, task.payload)
                    logger.error(
                        f"Scheduled task {task.task_id} failed: {result.message}; retrying at {retry_at.isoformat()}"
                    )
            except StorageError as e:
                logger.error(f"Could not update scheduled task {task.task_id}: {e}")

        self.stats.polls_completed += 1
        return len(due)

    def _handle_shutdown(self, signum, frame) -> None:
        """Handle graceful shutdown."""
        logger.info(f"Received signal {signum}, shutting down...")
        self.running = False

    def run(self) -> int:
        """Run the worker loop."""
        signal.signal(signal.SIGTERM, self._handle_shutdown)
        signal.signal(signal.SIGINT, self._handle_shutdown)

        logger.info(f"Scheduler worker starting, poll interval {self.poll_interval}s")
        self.running = True

        while self.running:
            self.run_due()

            # Sleep in small increments to respond to signals quickly
            sleep_remaining = self.poll_interval
            while sleep_remaining > 0 and self.running:
                sleep_time = min(sleep_remaining, 5)
                time.sleep(sleep_time)
                sleep_remaining -= sleep_time

        logger.info(
            f"Worker shutdown complete: polls={self.stats.polls_completed}, "
            f"run={self.stats.tasks_run}, failed={self.stats.tasks_failed}"
        )
        return 0


def main() -> int:
    """Entry point for the scheduler worker."""
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("=" * 60)
    logger.info(f"{settings.app_name} scheduler")
    logger.info("=" * 60)

    worker = SchedulerWorker(
        scheduler=SQLiteTaskScheduler(get_sqlite_client()),
        dispatcher=build_task_dispatcher(),
        poll_interval_seconds=settings.scheduler_poll_seconds,
    )
    return worker.run()


if __name__ == "__main__":
    raise SystemExit(main())
