from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence


@dataclass(frozen=True)
class WatchResponse:
    # users.watch: expiration in epoch milliseconds
    expiration_ms: int
    history_id: Optional[str] = None


class Subscription(Protocol):
    def subscribe(self, topic: str, label_ids: Sequence[str]) -> WatchResponse: ...
    def unsubscribe(self) -> None: ...
