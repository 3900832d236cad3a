"""Slack incoming-webhook notifier."""

from __future__ import annotations

import httpx
from loguru import logger

from gmailrelay.application.ports.notifier import ChatNotifier, NotifyResult


class SlackWebhookNotifier(ChatNotifier):
    """POST ``{"text": ...}`` to an incoming webhook; ``target`` is the webhook URL."""

    name = "slack"

    def __init__(self, timeout: float = 30.0, client: httpx.Client | None = None):
        self.timeout = timeout
        self._client = client

    def send(self, target: str, text: str) -> NotifyResult:
        try:
            client = self._client or httpx.Client()
            try:
                response = client.post(target, json={"text": text}, timeout=self.timeout)
            finally:
                if self._client is None:
                    client.close()

            # Slack answers a plain "ok" body on success
            if response.status_code == 200:
                logger.info("Slack webhook message sent")
                return NotifyResult(success=True)

            error_text = response.text
            logger.error(f"Slack webhook error {response.status_code}: {error_text[:200]}")
            return NotifyResult(success=False, error=f"HTTP {response.status_code}: {error_text[:200]}")

        except httpx.TimeoutException:
            logger.error("Slack webhook timeout")
            return NotifyResult(success=False, error="Request timeout")
        except httpx.HTTPError as e:
            logger.error(f"Slack webhook exception: {e}")
            return NotifyResult(success=False, error=str(e))
