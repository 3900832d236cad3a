"""Application settings using Pydantic Settings for configuration management."""

from datetime import timedelta
from functools import lru_cache
from types import MappingProxyType
from typing import Literal

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gmailrelay.application.config import RelayConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Gmail Relay"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # State (cursor, listening flag, scheduled tasks)
    sqlite_path: str = "data/relay_state.db"

    # Google credentials: authorized-user token file, or service account + delegated user
    google_token_file: str | None = None
    google_service_account_file: str | None = None
    google_delegated_user: str | None = None
    google_api_timeout: float = 30.0

    # Gmail
    gmail_user_id: str = "me"
    gmail_topic: str = ""
    gmail_label_ids: list[str] = Field(default_factory=lambda: ["INBOX"])
    watch_renewal_margin_minutes: int = 60
    history_max_pages: int | None = None

    # Sheets sink
    spreadsheet_id: str = ""
    sink_name: str = "Emails"
    sink_column_timestamp: str = "A"
    sink_column_sender: str = "B"
    sink_column_subject: str = "C"
    sink_timezone: str = "UTC"
    sink_lock_timeout: float = 60.0

    # Secrets (looked up through SecretStore)
    relay_api_key: SecretStr | None = None
    telegram_bot_token: SecretStr | None = None
    telegram_chat_id: str | None = None
    slack_webhook_url: SecretStr | None = None
    chat_timeout: float = 30.0

    # Push forwarding to a remote relay endpoint
    forward_url: str | None = None
    forward_api_key: SecretStr | None = None

    # Shared token Pub/Sub appends to the push endpoint URL (?token=...)
    pubsub_push_token: SecretStr | None = None

    # Scheduler worker
    scheduler_poll_seconds: int = 30

    @computed_field
    @property
    def gmail_scopes(self) -> list[str]:
        """OAuth scopes needed for history, watch and the sheet."""
        return [
            "https://www.googleapis.com/auth/gmail.readonly",
            "https://www.googleapis.com/auth/spreadsheets",
        ]

    def relay_config(self) -> RelayConfig:
        """Build the immutable relay configuration."""
        return RelayConfig(
            sink_name=self.sink_name,
            columns=MappingProxyType({
                "timestamp": self.sink_column_timestamp,
                "sender": self.sink_column_sender,
                "subject": self.sink_column_subject,
            }),
            timezone=self.sink_timezone,
            topic=self.gmail_topic,
            label_ids=tuple(self.gmail_label_ids),
            renewal_margin=timedelta(minutes=self.watch_renewal_margin_minutes),
            sink_lock_timeout=self.sink_lock_timeout,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@lru_cache
def get_relay_config() -> RelayConfig:
    """Relay configuration derived once from settings."""
    return get_settings().relay_config()
