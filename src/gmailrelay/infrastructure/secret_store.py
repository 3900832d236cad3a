"""Secret lookup backed by settings (environment / .env)."""

from __future__ import annotations

from typing import Optional

from pydantic import SecretStr

from gmailrelay.infrastructure.settings import Settings, get_settings

SECRET_KEYS = {
    "RELAY_API_KEY": "relay_api_key",
    "TELEGRAM_BOT_TOKEN": "telegram_bot_token",
    "TELEGRAM_CHAT_ID": "telegram_chat_id",
    "SLACK_WEBHOOK_URL": "slack_webhook_url",
    "FORWARD_API_KEY": "forward_api_key",
    "PUBSUB_PUSH_TOKEN": "pubsub_push_token",
}


class SettingsSecretStore:
    """Resolve secret keys to their string values; unknown or unset keys give None."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def get(self, key: str) -> Optional[str]:
        attr = SECRET_KEYS.get(key.upper())
        if attr is None:
            return None
        value = getattr(self.settings, attr, None)
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        return value or None
