"""Static relay configuration, built once at startup and injected."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from types import MappingProxyType
from typing import Mapping

DEFAULT_COLUMNS = MappingProxyType({"timestamp": "A", "sender": "B", "subject": "C"})


@dataclass(frozen=True)
class RelayConfig:
    sink_name: str = "Emails"
    columns: Mapping[str, str] = field(default_factory=lambda: DEFAULT_COLUMNS)
    timezone: str = "UTC"
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"
    notification_title: str = "New email(s) received"
    success_message: str = "Processed {count} new email(s)"
    empty_message: str = "No new emails"
    failure_message: str = "Failed to process notification"
    topic: str = ""
    label_ids: tuple[str, ...] = ("INBOX",)
    renewal_margin: timedelta = timedelta(hours=1)
    sink_lock_timeout: float = 60.0
