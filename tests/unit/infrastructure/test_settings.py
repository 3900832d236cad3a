"""Unit tests for Settings and SettingsSecretStore."""

from datetime import timedelta

import pytest

from gmailrelay.infrastructure.secret_store import SettingsSecretStore
from gmailrelay.infrastructure.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("RELAY_API_KEY", "GMAIL_TOPIC", "SINK_NAME", "SINK_COLUMN_SUBJECT", "TELEGRAM_BOT_TOKEN"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for environment-driven configuration."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        config = settings.relay_config()

        assert config.sink_name == "Emails"
        assert dict(config.columns) == {"timestamp": "A", "sender": "B", "subject": "C"}
        assert config.label_ids == ("INBOX",)
        assert config.renewal_margin == timedelta(hours=1)

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GMAIL_TOPIC", "projects/p/topics/gmail")
        monkeypatch.setenv("SINK_NAME", "Inbox Log")
        monkeypatch.setenv("SINK_COLUMN_SUBJECT", "AA")

        config = Settings(_env_file=None).relay_config()

        assert config.topic == "projects/p/topics/gmail"
        assert config.sink_name == "Inbox Log"
        assert config.columns["subject"] == "AA"


class TestSettingsSecretStore:
    """Tests for secret lookup."""

    def test_unwraps_secret_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RELAY_API_KEY", "s3cret")

        store = SettingsSecretStore(Settings(_env_file=None))

        assert store.get("RELAY_API_KEY") == "s3cret"
        assert store.get("relay_api_key") == "s3cret"

    def test_unset_and_unknown_keys(self) -> None:
        store = SettingsSecretStore(Settings(_env_file=None))

        assert store.get("TELEGRAM_BOT_TOKEN") is None
        assert store.get("DATABASE_PASSWORD") is None
