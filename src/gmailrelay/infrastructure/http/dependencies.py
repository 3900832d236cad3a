"""FastAPI dependencies; tests override these through ``app.dependency_overrides``."""

from __future__ import annotations

from fastapi import HTTPException
from loguru import logger

from gmailrelay.application.ports.secret_store import SecretStore
from gmailrelay.application.use_cases import RelayProcessor, TaskDispatcher
from gmailrelay.domain.errors import ConfigurationError
from gmailrelay.infrastructure.factory import build_relay_processor, build_task_dispatcher
from gmailrelay.infrastructure.http.push_forwarder import PushForwarder, get_push_forwarder
from gmailrelay.infrastructure.secret_store import SettingsSecretStore


def get_secret_store() -> SecretStore:
    return SettingsSecretStore()


def get_task_dispatcher() -> TaskDispatcher:
    return build_task_dispatcher()


def get_relay_processor() -> RelayProcessor:
    try:
        return build_relay_processor()
    except ConfigurationError as e:
        logger.error(f"Relay not configured: {e}")
        raise HTTPException(status_code=503, detail="Relay not configured")


def get_forwarder() -> PushForwarder:
    try:
        return get_push_forwarder()
    except ConfigurationError as e:
        logger.error(f"Forwarding not configured: {e}")
        raise HTTPException(status_code=503, detail="Forwarding not configured")
