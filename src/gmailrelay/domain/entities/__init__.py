from gmailrelay.domain.entities.cursor import Cursor
from gmailrelay.domain.entities.notification import Notification
from gmailrelay.domain.entities.record import ChangeRecord, Record, SinkRow

__all__ = [
    "ChangeRecord",
    "Cursor",
    "Notification",
    "Record",
    "SinkRow",
]
