"""HTTP routers."""

from gmailrelay.infrastructure.http.pubsub import router as pubsub_router
from gmailrelay.infrastructure.http.tasks import router as tasks_router

__all__ = [
    "pubsub_router",
    "tasks_router",
]
