from __future__ import annotations
from datetime import datetime
from typing import Any, Mapping, Optional, Protocol

from gmailrelay.domain.models import ScheduledTask


class TaskScheduler(Protocol):
    def schedule_at(
        self, run_at: datetime, task_id: str, task: str, payload: Optional[Mapping[str, Any]] = None
    ) -> ScheduledTask: ...
    def cancel(self, task_id: str) -> bool: ...
    def cancel_task(self, task: str) -> int: ...
    def pending(self, task: Optional[str] = None) -> list[ScheduledTask]: ...
    def due(self, now: datetime) -> list[ScheduledTask]: ...
