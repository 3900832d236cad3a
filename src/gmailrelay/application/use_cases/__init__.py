"""Use cases: relay runs, watch lifecycle and task dispatch."""

from gmailrelay.application.use_cases.dispatch_task import (
    PROCESS_NEW_EMAILS_TASK,
    STATUS_TASK,
    STOP_WATCH_TASK,
    TaskDispatcher,
)
from gmailrelay.application.use_cases.manage_watch import START_WATCH_TASK, WatchLifecycleManager
from gmailrelay.application.use_cases.relay_notification import RelayProcessor

__all__ = [
    "PROCESS_NEW_EMAILS_TASK",
    "START_WATCH_TASK",
    "STATUS_TASK",
    "STOP_WATCH_TASK",
    "RelayProcessor",
    "TaskDispatcher",
    "WatchLifecycleManager",
]
