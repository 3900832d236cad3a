from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional


@dataclass(frozen=True)
class ChangeRecord:
    # One messageAdded entry from users.history.list
    message_id: str
    thread_id: Optional[str] = None


@dataclass(frozen=True)
class Record:
    message_id: str
    thread_id: Optional[str]
    received_at: datetime
    sender: str
    subject: str
    snippet: str = ""
    label_ids: tuple[str, ...] = ()
    headers: Mapping[str, str] = field(default_factory=dict)  # first value per header name


@dataclass(frozen=True)
class SinkRow:
    """A Record projected onto the sink schema, in field order."""

    timestamp: str
    sender: str
    subject: str

    def as_fields(self) -> dict[str, str]:
        return {"timestamp": self.timestamp, "sender": self.sender, "subject": self.subject}

    def summary(self) -> str:
        return f"{self.timestamp}\nFrom: {self.sender}\nSubject: {self.subject}"
