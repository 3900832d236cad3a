"""
Pytest configuration and shared fixtures for gmail-relay tests.

Provides:
- Fixtures built on the in-memory fakes in fakes.py
- A RelayProcessor wired to those fakes
"""

from __future__ import annotations

import pytest

from fakes import FakeChangeLog, FakeCursorStore, FakeNotifier, FakeSink, make_record
from gmailrelay.application.config import RelayConfig
from gmailrelay.application.ports.change_log import HistoryPage
from gmailrelay.application.ports.notifier import NotificationChannel
from gmailrelay.application.sync.change_fetcher import ChangeFetcher
from gmailrelay.application.sync.sink_lock import SinkLocks
from gmailrelay.application.use_cases import RelayProcessor
from gmailrelay.domain.entities.record import ChangeRecord


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def relay_config() -> RelayConfig:
    return RelayConfig(topic="projects/p/topics/gmail")


@pytest.fixture
def cursor_store() -> FakeCursorStore:
    return FakeCursorStore()


@pytest.fixture
def change_log() -> FakeChangeLog:
    """Two added messages after historyId 100, reported up to 115."""
    return FakeChangeLog(
        pages={
            "100": [
                HistoryPage(
                    changes=[ChangeRecord("m1")],
                    history_id="110",
                    next_page_token="1",
                ),
                HistoryPage(changes=[ChangeRecord("m2")], history_id="115"),
            ],
        },
        messages={
            "m1": make_record("m1", subject="First"),
            "m2": make_record("m2", subject="Second", sender="bob@example.com"),
        },
    )


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink(existing_rows=1)  # header row


@pytest.fixture
def notifiers() -> list[FakeNotifier]:
    return [FakeNotifier("telegram"), FakeNotifier("slack")]


@pytest.fixture
def processor(
    cursor_store: FakeCursorStore,
    change_log: FakeChangeLog,
    sink: FakeSink,
    notifiers: list[FakeNotifier],
    relay_config: RelayConfig,
) -> RelayProcessor:
    return RelayProcessor(
        cursor_store=cursor_store,
        fetcher=ChangeFetcher(change_log),
        sink=sink,
        config=relay_config,
        channels=[NotificationChannel(n, f"{n.name}-target") for n in notifiers],
        locks=SinkLocks(),
    )
