"""Sync building blocks: decoding, history fetch and sink layout."""

from gmailrelay.application.sync.change_fetcher import ChangeFetcher, FetchResult
from gmailrelay.application.sync.layout import LayoutMap, column_index, column_letters, get_layout
from gmailrelay.application.sync.sink_lock import SinkLocks, sink_locks
from gmailrelay.application.sync.notification_decoder import NotificationDecoder, unwrap_push_envelope

__all__ = [
    "ChangeFetcher",
    "FetchResult",
    "LayoutMap",
    "NotificationDecoder",
    "SinkLocks",
    "column_index",
    "column_letters",
    "get_layout",
    "sink_locks",
    "unwrap_push_envelope",
]
