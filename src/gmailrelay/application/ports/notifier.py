from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol


@dataclass
class NotifyResult:
    """Result of one chat send."""

    success: bool
    message_id: str | None = None
    error: str | None = None


class ChatNotifier(Protocol):
    name: str

    def send(self, target: str, text: str) -> NotifyResult: ...


@dataclass(frozen=True)
class NotificationChannel:
    """A notifier bound to one destination (chat id, webhook URL)."""

    notifier: ChatNotifier
    target: str

    @property
    def name(self) -> str:
        return self.notifier.name
