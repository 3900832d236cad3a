"""Forward Gmail push notifications to a remote relay task endpoint.

This is the proxy role: Pub/Sub pushes to a public endpoint, which re-posts
``processNewEmails`` with an API key to a relay that cannot receive Pub/Sub
pushes itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import httpx
from loguru import logger

from gmailrelay.application.sync.notification_decoder import NotificationDecoder, unwrap_push_envelope
from gmailrelay.domain.errors import ConfigurationError, DecodeError


@dataclass
class ForwardResult:
    """Result of forwarding one notification."""

    forwarded: bool
    status_code: int | None = None
    success: bool | None = None
    message: str | None = None
    error: str | None = None


class PushForwarder:
    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
        decoder: NotificationDecoder | None = None,
    ):
        if not url:
            raise ConfigurationError("FORWARD_URL is not configured")
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._client = client
        self.decoder = decoder or NotificationDecoder()

    def forward(self, envelope: Mapping[str, Any]) -> ForwardResult:
        try:
            notification = self.decoder.decode(unwrap_push_envelope(envelope))
        except DecodeError as e:
            logger.warning(f"Not forwarding push: {e}")
            return ForwardResult(forwarded=False, error=e.reason)

        logger.info(
            f"Relaying Gmail notification for {notification.origin_identity} "
            f"with historyId {notification.cursor}..."
        )
        payload = {
            "apiKey": self.api_key,
            "task": "processNewEmails",
            "data": {
                "emailAddress": notification.origin_identity,
                "historyId": notification.cursor.value,
            },
        }

        try:
            client = self._client or httpx.Client()
            try:
                response = client.post(self.url, json=payload, timeout=self.timeout, follow_redirects=True)
            finally:
                if self._client is None:
                    client.close()
        except httpx.TimeoutException:
            logger.error(f"Relay endpoint timeout for {notification.origin_identity}")
            return ForwardResult(forwarded=False, error="Request timeout")
        except httpx.HTTPError as e:
            logger.error(f"Error forwarding push: {e}")
            return ForwardResult(forwarded=False, error=str(e))

        try:
            body = response.json()
        except ValueError:
            body = {}
        success = body.get("success") if isinstance(body, dict) else None
        message = body.get("message") if isinstance(body, dict) else None
        logger.info(f"Relay responded with status {response.status_code} and success is {success}: {message}")
        return ForwardResult(
            forwarded=True,
            status_code=response.status_code,
            success=success,
            message=message,
        )


def get_push_forwarder() -> PushForwarder:
    from gmailrelay.infrastructure.secret_store import SettingsSecretStore
    from gmailrelay.infrastructure.settings import get_settings

    settings = get_settings()
    api_key = SettingsSecretStore(settings).get("FORWARD_API_KEY")
    if not api_key:
        raise ConfigurationError("FORWARD_API_KEY is not configured")
    return PushForwarder(settings.forward_url or "", api_key, timeout=settings.chat_timeout)
