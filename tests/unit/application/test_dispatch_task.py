"""Unit tests for TaskDispatcher."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from gmailrelay.application.use_cases import RelayProcessor, TaskDispatcher, WatchLifecycleManager
from gmailrelay.domain.errors import ConfigurationError, RelayError


@pytest.fixture
def watch_manager() -> MagicMock:
    return MagicMock(spec=WatchLifecycleManager)


def make_dispatcher(processor, watch_manager) -> TaskDispatcher:
    return TaskDispatcher(relay_factory=lambda: processor, watch_factory=lambda: watch_manager)


class TestDispatch:
    """Tests for task routing."""

    def test_process_new_emails(self, processor: RelayProcessor, watch_manager) -> None:
        result = make_dispatcher(processor, watch_manager).dispatch(
            "processNewEmails", {"emailAddress": "user@x.com", "historyId": "100"}
        )

        assert result.success is True
        assert result.records == 2
        watch_manager.start.assert_not_called()

    def test_start_watch_passes_task_id(self, processor, watch_manager) -> None:
        from datetime import datetime, timezone

        watch_manager.start.return_value = datetime(2024, 5, 8, tzinfo=timezone.utc) - timedelta(hours=1)

        result = make_dispatcher(processor, watch_manager).dispatch("startWatch", task_id="startWatch-abc")

        assert result.success is True
        watch_manager.start.assert_called_once_with(trigger_task_id="startWatch-abc")

    def test_stop_watch(self, processor, watch_manager) -> None:
        result = make_dispatcher(processor, watch_manager).dispatch("stopWatch")

        assert result.success is True
        watch_manager.stop.assert_called_once_with()

    def test_status(self, processor, watch_manager) -> None:
        watch_manager.status.return_value = {"listening": False, "renewal_deadline": None, "cursor": None}

        result = make_dispatcher(processor, watch_manager).dispatch("status")

        assert result.success is True
        assert "stopped" in result.message

    def test_watch_error_becomes_failure(self, processor, watch_manager) -> None:
        watch_manager.start.side_effect = RelayError("users.watch failed: 403", reason="WatchFailed")

        result = make_dispatcher(processor, watch_manager).dispatch("startWatch")

        assert result.success is False
        assert result.error_reason == "WatchFailed"
        assert "403" not in result.message

    def test_relay_configuration_error(self, watch_manager) -> None:
        def broken():
            raise ConfigurationError("SPREADSHEET_ID is not configured")

        dispatcher = TaskDispatcher(relay_factory=broken, watch_factory=lambda: watch_manager)

        result = dispatcher.dispatch("processNewEmails", {})

        assert result.success is False
        assert result.error_reason == "Misconfigured"

    def test_unknown_task(self, processor, watch_manager) -> None:
        result = make_dispatcher(processor, watch_manager).dispatch("launchRockets")

        assert result.success is False
        assert result.error_reason == "UnknownTask"
