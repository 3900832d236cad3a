"""Wire concrete adapters into the relay use cases."""

from __future__ import annotations

from functools import lru_cache

from loguru import logger

from gmailrelay.application.config import RelayConfig
from gmailrelay.application.ports.notifier import NotificationChannel
from gmailrelay.application.ports.secret_store import SecretStore
from gmailrelay.application.sync.change_fetcher import ChangeFetcher
from gmailrelay.application.use_cases import RelayProcessor, TaskDispatcher, WatchLifecycleManager
from gmailrelay.domain.errors import ConfigurationError
from gmailrelay.infrastructure.gmail import (
    GmailChangeLog,
    GmailSubscription,
    GoogleAuthenticator,
    GoogleCredentialsConfig,
)
from gmailrelay.infrastructure.notifiers import SlackWebhookNotifier, TelegramNotifier
from gmailrelay.infrastructure.secret_store import SettingsSecretStore
from gmailrelay.infrastructure.settings import Settings, get_relay_config, get_settings
from gmailrelay.infrastructure.sheets import GoogleSheetsSink
from gmailrelay.infrastructure.sqlite import SQLiteCursorStore, SQLiteTaskScheduler, get_sqlite_client


@lru_cache
def get_google_authenticator() -> GoogleAuthenticator:
    settings = get_settings()
    return GoogleAuthenticator(
        GoogleCredentialsConfig(
            scopes=settings.gmail_scopes,
            token_file=settings.google_token_file,
            service_account_file=settings.google_service_account_file,
            delegated_user=settings.google_delegated_user,
            timeout=settings.google_api_timeout,
        )
    )


def build_channels(secrets: SecretStore, settings: Settings) -> list[NotificationChannel]:
    """Chat channels for every notifier whose secrets are configured."""
    channels: list[NotificationChannel] = []

    bot_token = secrets.get("TELEGRAM_BOT_TOKEN")
    chat_id = secrets.get("TELEGRAM_CHAT_ID")
    if bot_token and chat_id:
        channels.append(NotificationChannel(TelegramNotifier(bot_token, timeout=settings.chat_timeout), chat_id))

    webhook = secrets.get("SLACK_WEBHOOK_URL")
    if webhook:
        channels.append(NotificationChannel(SlackWebhookNotifier(timeout=settings.chat_timeout), webhook))

    logger.debug(f"Chat channels configured: {[c.name for c in channels]}")
    return channels


def _resolve(settings: Settings | None) -> tuple[Settings, RelayConfig]:
    if settings is None:
        return get_settings(), get_relay_config()
    return settings, settings.relay_config()


def build_relay_processor(settings: Settings | None = None) -> RelayProcessor:
    settings, config = _resolve(settings)
    if not settings.spreadsheet_id:
        raise ConfigurationError("SPREADSHEET_ID is not configured")

    auth = get_google_authenticator()
    label_id = settings.gmail_label_ids[0] if len(settings.gmail_label_ids) == 1 else None
    change_log = GmailChangeLog(
        lambda: auth.service("gmail", "v1"),
        user_id=settings.gmail_user_id,
        label_id=label_id,
    )
    return RelayProcessor(
        cursor_store=SQLiteCursorStore(get_sqlite_client()),
        fetcher=ChangeFetcher(change_log, max_pages=settings.history_max_pages),
        sink=GoogleSheetsSink(lambda: auth.service("sheets", "v4"), settings.spreadsheet_id),
        config=config,
        channels=build_channels(SettingsSecretStore(settings), settings),
    )


def build_watch_manager(settings: Settings | None = None) -> WatchLifecycleManager:
    settings, config = _resolve(settings)
    auth = get_google_authenticator()
    client = get_sqlite_client()
    return WatchLifecycleManager(
        subscription=GmailSubscription(lambda: auth.service("gmail", "v1"), user_id=settings.gmail_user_id),
        cursor_store=SQLiteCursorStore(client),
        scheduler=SQLiteTaskScheduler(client),
        config=config,
    )


def build_task_dispatcher() -> TaskDispatcher:
    return TaskDispatcher(relay_factory=build_relay_processor, watch_factory=build_watch_manager)
