"""Outbound chat notifiers."""

from gmailrelay.infrastructure.notifiers.slack import SlackWebhookNotifier
from gmailrelay.infrastructure.notifiers.telegram import TelegramNotifier

__all__ = [
    "SlackWebhookNotifier",
    "TelegramNotifier",
]
