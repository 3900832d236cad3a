"""Infrastructure layer - Google APIs, storage, notifiers and configuration."""

from gmailrelay.infrastructure.factory import (
    build_channels,
    build_relay_processor,
    build_task_dispatcher,
    build_watch_manager,
)
from gmailrelay.infrastructure.settings import Settings, get_relay_config, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "get_relay_config",
    # Wiring
    "build_channels",
    "build_relay_processor",
    "build_task_dispatcher",
    "build_watch_manager",
]
