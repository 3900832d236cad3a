"""Application layer - relay core, sync helpers and use cases."""

from gmailrelay.application.sync import ChangeFetcher, FetchResult, LayoutMap, NotificationDecoder
from gmailrelay.application.use_cases import RelayProcessor, TaskDispatcher, WatchLifecycleManager

__all__ = [
    "ChangeFetcher",
    "FetchResult",
    "LayoutMap",
    "NotificationDecoder",
    "RelayProcessor",
    "TaskDispatcher",
    "WatchLifecycleManager",
]
