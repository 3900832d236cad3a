"""Keep the Gmail watch registration alive."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from loguru import logger

from gmailrelay.application.config import RelayConfig
from gmailrelay.application.ports.cursor_store import CursorStore
from gmailrelay.application.ports.scheduler import TaskScheduler
from gmailrelay.application.ports.subscription import Subscription
from gmailrelay.domain.entities.cursor import Cursor
from gmailrelay.domain.errors import ConfigurationError

START_WATCH_TASK = "startWatch"


class WatchLifecycleManager:
    """Start, renew and stop the Gmail watch.

    A Gmail watch expires after about a week. ``start`` registers it and
    schedules a one-shot ``startWatch`` task an hour before expiry; when the
    scheduler runs that task it calls ``start`` again with the task's id, which
    is then deleted. Renewal is Listening -> Listening; ``stop`` returns to Stopped.
    """

    def __init__(
        self,
        subscription: Subscription,
        cursor_store: CursorStore,
        scheduler: TaskScheduler,
        config: RelayConfig,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.subscription = subscription
        self.cursor_store = cursor_store
        self.scheduler = scheduler
        self.config = config
        self.clock = clock

    def start(self, trigger_task_id: Optional[str] = None) -> datetime:
        """Register (or renew) the watch; returns the renewal deadline."""
        if not self.config.topic:
            raise ConfigurationError("Pub/Sub topic is not configured")

        response = self.subscription.subscribe(self.config.topic, self.config.label_ids)
        expiration = datetime.fromtimestamp(response.expiration_ms / 1000, tz=timezone.utc)
        deadline = expiration - self.config.renewal_margin
        now = self.clock()
        if deadline <= now:
            # Very short expirations: renew at the halfway point instead
            deadline = now + (expiration - now) / 2
        logger.info(f"Watch registered on {self.config.topic}, expires {expiration.isoformat()}")

        if not trigger_task_id:
            # Manual start supersedes any renewal chain already pending
            superseded = self.scheduler.cancel_task(START_WATCH_TASK)
            if superseded:
                logger.info(f"Cancelled {superseded} pending renewal(s) superseded by manual start")

        task_id = f"{START_WATCH_TASK}-{uuid.uuid4().hex}"
        self.scheduler.schedule_at(deadline, task_id, START_WATCH_TASK)
        logger.info(f"Scheduled watch renewal {task_id} at {deadline.isoformat()}")

        if trigger_task_id:
            if self.scheduler.cancel(trigger_task_id):
                logger.debug(f"Deleted triggering task {trigger_task_id}")
            else:
                logger.debug(f"Triggering task {trigger_task_id} already gone")

        if response.history_id and self.cursor_store.get_cursor() is None:
            self.cursor_store.set_cursor(Cursor(response.history_id))
            logger.info(f"Seeded cursor from watch response: {response.history_id}")

        self.cursor_store.set_renewal_deadline(deadline)
        self.cursor_store.set_listening(True)
        return deadline

    def stop(self) -> None:
        """Deregister the watch, cancel renewals and forget the cursor."""
        self.subscription.unsubscribe()
        cancelled = self.scheduler.cancel_task(START_WATCH_TASK)
        logger.info(f"Watch stopped, cancelled {cancelled} pending renewal(s)")

        self.cursor_store.set_listening(False)
        self.cursor_store.set_renewal_deadline(None)
        self.cursor_store.clear_cursor()

    def status(self) -> dict[str, Any]:
        state = self.cursor_store.get_subscription_state()
        cursor = self.cursor_store.get_cursor()
        return {
            "listening": state.is_active,
            "renewal_deadline": state.renewal_deadline.isoformat() if state.renewal_deadline else None,
            "cursor": str(cursor) if cursor is not None else None,
            "pending_renewals": len(self.scheduler.pending(START_WATCH_TASK)),
        }
