"""Domain models and entities."""

from gmailrelay.domain.entities import ChangeRecord, Cursor, Notification, Record, SinkRow
from gmailrelay.domain.models import RelayResult, RunState, ScheduledTask, SubscriptionState

__all__ = [
    "ChangeRecord",
    "Cursor",
    "Notification",
    "Record",
    "SinkRow",
    "RelayResult",
    "RunState",
    "ScheduledTask",
    "SubscriptionState",
]
