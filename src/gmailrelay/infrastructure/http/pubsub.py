"""Pub/Sub push endpoints for Gmail notifications."""

from __future__ import annotations

import hmac
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response
from loguru import logger

from gmailrelay.application.ports.secret_store import SecretStore
from gmailrelay.application.sync.notification_decoder import unwrap_push_envelope
from gmailrelay.application.use_cases import RelayProcessor
from gmailrelay.domain.errors import DecodeError
from gmailrelay.infrastructure.http.dependencies import get_forwarder, get_relay_processor, get_secret_store
from gmailrelay.infrastructure.http.push_forwarder import PushForwarder


router = APIRouter(prefix="/pubsub", tags=["pubsub"])


def _token_ok(token: str | None, secrets: SecretStore) -> bool:
    expected = secrets.get("PUBSUB_PUSH_TOKEN")
    if not expected:
        return True
    return bool(token) and hmac.compare_digest(token.encode(), expected.encode())


@router.post("/push", status_code=204)
def receive_push(
    envelope: dict[str, Any] = Body(...),
    token: str | None = Query(default=None),
    secrets: SecretStore = Depends(get_secret_store),
    processor: RelayProcessor = Depends(get_relay_processor),
) -> Response:
    """
    Relay a Pub/Sub push in-process.

    2xx acknowledges the message. Undecodable payloads are acknowledged so
    Pub/Sub stops redelivering them; failed runs answer 503 so it retries.
    """
    if not _token_ok(token, secrets):
        logger.warning("Pub/Sub push with invalid token")
        return Response(status_code=401)

    try:
        raw = unwrap_push_envelope(envelope)
    except DecodeError as e:
        logger.warning(f"Dropping push: {e}")
        return Response(status_code=204)

    result = processor.process(raw)
    if result.success or result.error_reason == DecodeError.reason:
        return Response(status_code=204)
    return Response(status_code=503)


@router.post("/forward", status_code=204)
def forward_push(
    envelope: dict[str, Any] = Body(...),
    token: str | None = Query(default=None),
    secrets: SecretStore = Depends(get_secret_store),
    forwarder: PushForwarder = Depends(get_forwarder),
) -> Response:
    """Re-post a Pub/Sub push to the configured relay; always acknowledged."""
    if not _token_ok(token, secrets):
        logger.warning("Pub/Sub forward with invalid token")
        return Response(status_code=401)

    forwarder.forward(envelope)
    return Response(status_code=204)
