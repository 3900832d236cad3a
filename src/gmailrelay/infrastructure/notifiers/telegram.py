"""Telegram Bot API notifier."""

from __future__ import annotations

import httpx
from loguru import logger

from gmailrelay.application.ports.notifier import ChatNotifier, NotifyResult

TELEGRAM_MAX_CHARS = 4096


class TelegramNotifier(ChatNotifier):
    """Send messages through ``sendMessage``; ``target`` is the chat id."""

    BASE_URL = "https://api.telegram.org"
    name = "telegram"

    def __init__(self, bot_token: str, timeout: float = 30.0, client: httpx.Client | None = None):
        if not bot_token:
            raise ValueError("Telegram bot token is required")
        self.bot_token = bot_token
        self.timeout = timeout
        self._client = client

    def send(self, target: str, text: str) -> NotifyResult:
        if len(text) > TELEGRAM_MAX_CHARS:
            text = text[: TELEGRAM_MAX_CHARS - 3] + "..."
            logger.warning(f"Telegram message truncated to {TELEGRAM_MAX_CHARS} chars for {target}")

        payload = {"chat_id": target, "text": text, "disable_web_page_preview": True}

        try:
            client = self._client or httpx.Client()
            try:
                response = client.post(
                    f"{self.BASE_URL}/bot{self.bot_token}/sendMessage",
                    json=payload,
                    timeout=self.timeout,
                )
            finally:
                if self._client is None:
                    client.close()

            is_json = response.headers.get("content-type", "").startswith("application/json")
            data = response.json() if is_json else {}
            if response.status_code == 200 and data.get("ok"):
                message_id = data.get("result", {}).get("message_id")
                logger.info(f"Telegram message sent to {target}, message_id={message_id}")
                return NotifyResult(success=True, message_id=str(message_id) if message_id else None)

            error_text = response.text
            logger.error(f"Telegram API error {response.status_code}: {error_text[:200]}")
            return NotifyResult(success=False, error=f"HTTP {response.status_code}: {error_text[:200]}")

        except httpx.TimeoutException:
            logger.error(f"Telegram API timeout sending to {target}")
            return NotifyResult(success=False, error="Request timeout")
        except httpx.HTTPError as e:
            logger.error(f"Telegram API exception: {e}")
            return NotifyResult(success=False, error=str(e))
