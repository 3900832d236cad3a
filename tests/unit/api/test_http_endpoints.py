"""Tests for the task and Pub/Sub push endpoints."""

import base64
import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from fakes import FakeSecretStore
from gmailrelay.api.main import create_app
from gmailrelay.domain.models import RelayResult, RunState
from gmailrelay.infrastructure.http.dependencies import (
    get_forwarder,
    get_relay_processor,
    get_secret_store,
    get_task_dispatcher,
)


def push_envelope(payload) -> dict:
    raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    return {"message": {"data": base64.b64encode(raw).decode(), "messageId": "42"}, "subscription": "sub"}


@pytest.fixture
def secrets() -> FakeSecretStore:
    return FakeSecretStore({"RELAY_API_KEY": "k3y"})


@pytest.fixture
def dispatcher() -> MagicMock:
    mock = MagicMock()
    mock.dispatch.return_value = RelayResult(success=True, message="Processed 2 new email(s)", records=2)
    return mock


@pytest.fixture
def processor() -> MagicMock:
    mock = MagicMock()
    mock.process.return_value = RelayResult(success=True, message="No new emails")
    return mock


@pytest.fixture
def forwarder() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(secrets, dispatcher, processor, forwarder) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_secret_store] = lambda: secrets
    app.dependency_overrides[get_task_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_relay_processor] = lambda: processor
    app.dependency_overrides[get_forwarder] = lambda: forwarder
    return TestClient(app)


class TestTaskEndpoint:
    """Tests for POST / and POST /tasks."""

    def test_process_new_emails(self, client: TestClient, dispatcher: MagicMock) -> None:
        body = {
            "apiKey": "k3y",
            "task": "processNewEmails",
            "data": {"emailAddress": "user@example.com", "historyId": "100"},
        }

        response = client.post("/", json=body)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Processed 2 new email(s)"}
        dispatcher.dispatch.assert_called_once_with(
            "processNewEmails", {"emailAddress": "user@example.com", "historyId": "100"}, task_id=None
        )

    def test_tasks_alias_passes_task_id(self, client: TestClient, dispatcher: MagicMock) -> None:
        client.post("/tasks", json={"apiKey": "k3y", "task": "startWatch", "taskId": "startWatch-1"})

        dispatcher.dispatch.assert_called_once_with("startWatch", {}, task_id="startWatch-1")

    def test_wrong_api_key(self, client: TestClient, dispatcher: MagicMock) -> None:
        response = client.post("/", json={"apiKey": "nope", "task": "status"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Unauthorized"}
        dispatcher.dispatch.assert_not_called()

    def test_unconfigured_api_key_rejects_everything(
        self, client: TestClient, secrets: FakeSecretStore, dispatcher: MagicMock
    ) -> None:
        secrets.values.clear()

        response = client.post("/", json={"apiKey": "", "task": "status"})

        assert response.status_code == 401
        dispatcher.dispatch.assert_not_called()

    def test_failed_task_keeps_details_out_of_response(self, client: TestClient, dispatcher: MagicMock) -> None:
        dispatcher.dispatch.return_value = RelayResult(
            success=False,
            message="Failed to process notification",
            state=RunState.ABORTED,
            error_reason="ListingFailed",
        )

        response = client.post("/", json={"apiKey": "k3y", "task": "processNewEmails", "data": {}})

        assert response.status_code == 200
        assert response.json() == {"success": False, "message": "Failed to process notification"}

    def test_missing_task_is_invalid_request(self, client: TestClient) -> None:
        response = client.post("/", json={"apiKey": "k3y"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid request"}

    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json()["status"] == "healthy"


class TestPubSubPush:
    """Tests for POST /pubsub/push."""

    def test_success_acknowledges(self, client: TestClient, processor: MagicMock) -> None:
        payload = {"emailAddress": "user@example.com", "historyId": 100}

        response = client.post("/pubsub/push", json=push_envelope(payload))

        assert response.status_code == 204
        processor.process.assert_called_once_with(json.dumps(payload).encode())

    def test_missing_data_is_dropped(self, client: TestClient, processor: MagicMock) -> None:
        response = client.post("/pubsub/push", json={"message": {"messageId": "1"}})

        assert response.status_code == 204
        processor.process.assert_not_called()

    def test_invalid_payload_is_acknowledged(self, client: TestClient, processor: MagicMock) -> None:
        processor.process.return_value = RelayResult(
            success=False, message="Failed", state=RunState.ABORTED, error_reason="InvalidPayload"
        )

        response = client.post("/pubsub/push", json=push_envelope(b"not json"))

        assert response.status_code == 204

    def test_failed_run_asks_for_redelivery(self, client: TestClient, processor: MagicMock) -> None:
        processor.process.return_value = RelayResult(
            success=False, message="Failed", state=RunState.ABORTED, error_reason="WriteFailed"
        )

        response = client.post("/pubsub/push", json=push_envelope({"emailAddress": "a@b.c", "historyId": "1"}))

        assert response.status_code == 503

    def test_push_token(self, client: TestClient, secrets: FakeSecretStore, processor: MagicMock) -> None:
        secrets.values["PUBSUB_PUSH_TOKEN"] = "tok"
        envelope = push_envelope({"emailAddress": "a@b.c", "historyId": "1"})

        assert client.post("/pubsub/push", json=envelope).status_code == 401
        assert client.post("/pubsub/push?token=bad", json=envelope).status_code == 401
        assert client.post("/pubsub/push?token=tok", json=envelope).status_code == 204
        processor.process.assert_called_once()


class TestPubSubForward:
    """Tests for POST /pubsub/forward."""

    def test_forwards_and_acknowledges(self, client: TestClient, forwarder: MagicMock) -> None:
        envelope = push_envelope({"emailAddress": "a@b.c", "historyId": "1"})

        response = client.post("/pubsub/forward", json=envelope)

        assert response.status_code == 204
        forwarder.forward.assert_called_once_with(envelope)
