"""Route named tasks (from the HTTP endpoint or the scheduler) to use cases."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from loguru import logger

from gmailrelay.application.use_cases.manage_watch import START_WATCH_TASK, WatchLifecycleManager
from gmailrelay.application.use_cases.relay_notification import RelayProcessor
from gmailrelay.domain.errors import RelayError
from gmailrelay.domain.models import RelayResult, RunState

PROCESS_NEW_EMAILS_TASK = "processNewEmails"
STOP_WATCH_TASK = "stopWatch"
STATUS_TASK = "status"


class TaskDispatcher:
    """Runs ``processNewEmails``, ``startWatch``, ``stopWatch`` and ``status``.

    Collaborators are built lazily so a relay-only deployment never needs watch
    credentials and vice versa. Every task returns a RelayResult; internal error
    text stays in the log.
    """

    def __init__(
        self,
        relay_factory: Callable[[], RelayProcessor],
        watch_factory: Callable[[], WatchLifecycleManager],
    ) -> None:
        self.relay_factory = relay_factory
        self.watch_factory = watch_factory

    @property
    def tasks(self) -> tuple[str, ...]:
        return (PROCESS_NEW_EMAILS_TASK, START_WATCH_TASK, STOP_WATCH_TASK, STATUS_TASK)

    def dispatch(
        self,
        task: str,
        data: Optional[Mapping[str, Any]] = None,
        task_id: Optional[str] = None,
    ) -> RelayResult:
        if task == PROCESS_NEW_EMAILS_TASK:
            try:
                processor = self.relay_factory()
            except RelayError as e:
                return self._failed(task, e)
            return processor.process_data(data)
        if task == START_WATCH_TASK:
            return self._watch_call(task, lambda m: self._start(m, task_id))
        if task == STOP_WATCH_TASK:
            return self._watch_call(task, self._stop)
        if task == STATUS_TASK:
            return self._watch_call(task, self._status)

        logger.warning(f"Unknown task requested: {task!r}")
        return RelayResult(
            success=False,
            message=f"Unknown task: {task}",
            state=RunState.ABORTED,
            error_reason="UnknownTask",
        )

    def _start(self, manager: WatchLifecycleManager, task_id: Optional[str]) -> str:
        deadline = manager.start(trigger_task_id=task_id)
        return f"Watch started, renewal at {deadline.isoformat()}"

    def _stop(self, manager: WatchLifecycleManager) -> str:
        manager.stop()
        return "Watch stopped"

    def _status(self, manager: WatchLifecycleManager) -> str:
        status = manager.status()
        state = "listening" if status["listening"] else "stopped"
        return f"Watch {state}, renewal at {status['renewal_deadline']}, cursor {status['cursor']}"

    def _watch_call(self, task: str, fn: Callable[[WatchLifecycleManager], str]) -> RelayResult:
        try:
            message = fn(self.watch_factory())
        except RelayError as e:
            return self._failed(task, e)
        logger.info(f"Task {task}: {message}")
        return RelayResult(success=True, message=message)

    def _failed(self, task: str, error: RelayError) -> RelayResult:
        logger.error(f"Task {task} failed ({error.reason}): {error}")
        return RelayResult(
            success=False,
            message=f"Task {task} failed",
            state=RunState.ABORTED,
            error_reason=error.reason,
        )
