"""Domain models for run results, subscription state and scheduled tasks."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class RunState(str, Enum):
    """States of a single relay run."""

    IDLE = "idle"
    DECODING = "decoding"
    RESOLVING_CURSOR = "resolving_cursor"
    FETCHING = "fetching"
    PROJECTING = "projecting"
    WRITING = "writing"
    NOTIFYING = "notifying"
    ADVANCING = "advancing"
    ABORTED = "aborted"


class RelayResult(BaseModel):
    """Outcome of a relay run.

    Only ``success`` and ``message`` go on the wire; the rest is for logs and tests.
    """

    success: bool
    message: str
    state: RunState = RunState.IDLE
    records: int = 0
    cursor: str | None = None
    error_reason: str | None = None

    def wire(self) -> dict[str, Any]:
        return {"success": self.success, "message": self.message}


class SubscriptionState(BaseModel):
    """Whether the Gmail watch is active and when it must be renewed."""

    is_active: bool = False
    renewal_deadline: datetime | None = None


class ScheduledTask(BaseModel):
    """A one-shot task persisted by the scheduler."""

    task_id: str
    task: str
    run_at: datetime
    payload: dict[str, Any] = Field(default_factory=dict)
