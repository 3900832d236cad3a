"""Task endpoint: ``{apiKey, task, data}`` in, ``{success, message}`` out."""

from __future__ import annotations

import hmac
from typing import Any

from fastapi import APIRouter, Depends, Response
from loguru import logger
from pydantic import BaseModel, Field

from gmailrelay.application.ports.secret_store import SecretStore
from gmailrelay.application.use_cases import TaskDispatcher
from gmailrelay.infrastructure.http.dependencies import get_secret_store, get_task_dispatcher


router = APIRouter(tags=["tasks"])


# ============================================================================
# Request/Response Models
# ============================================================================


class TaskRequest(BaseModel):
    """A task invocation from the push proxy or an operator."""

    apiKey: str = ""
    task: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)
    taskId: str | None = None


class TaskResponse(BaseModel):
    success: bool
    message: str


# ============================================================================
# Endpoints
# ============================================================================


def _authorized(provided: str, secrets: SecretStore) -> bool:
    expected = secrets.get("RELAY_API_KEY")
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())


@router.post("/", response_model=TaskResponse)
@router.post("/tasks", response_model=TaskResponse)
def run_task(
    request: TaskRequest,
    response: Response,
    secrets: SecretStore = Depends(get_secret_store),
    dispatcher: TaskDispatcher = Depends(get_task_dispatcher),
) -> TaskResponse:
    """
    Run a named task.

    Tasks: processNewEmails (data = {emailAddress, historyId}), startWatch,
    stopWatch, status. Failures are reported as success=false with a generic
    message; details go to the log only.
    """
    if not _authorized(request.apiKey, secrets):
        logger.warning(f"Unauthorized task request: {request.task}")
        response.status_code = 401
        return TaskResponse(success=False, message="Unauthorized")

    try:
        result = dispatcher.dispatch(request.task, request.data, task_id=request.taskId)
    except Exception as e:
        logger.exception(f"Task {request.task} crashed: {e}")
        return TaskResponse(success=False, message=f"Task {request.task} failed")

    return TaskResponse(**result.wire())
