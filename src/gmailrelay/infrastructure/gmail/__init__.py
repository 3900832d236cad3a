"""Gmail API integration."""

from gmailrelay.infrastructure.gmail.auth import GoogleAuthenticator, GoogleCredentialsConfig
from gmailrelay.infrastructure.gmail.client import GmailChangeLog, GmailSubscription
from gmailrelay.infrastructure.gmail.mapper import gmail_message_to_record

__all__ = [
    "GmailChangeLog",
    "GmailSubscription",
    "GoogleAuthenticator",
    "GoogleCredentialsConfig",
    "gmail_message_to_record",
]
