"""Unit tests for PushForwarder."""

import base64
import json

import httpx
import pytest

from gmailrelay.domain.errors import ConfigurationError
from gmailrelay.infrastructure.http.push_forwarder import PushForwarder


def envelope(payload: dict) -> dict:
    data = base64.b64encode(json.dumps(payload).encode()).decode()
    return {"message": {"data": data, "messageId": "1"}, "subscription": "s"}


class TestPushForwarder:
    """Tests for re-posting pushes to the relay task endpoint."""

    def test_forwards_process_new_emails(self) -> None:
        posted = []

        def handler(request: httpx.Request) -> httpx.Response:
            posted.append(json.loads(request.content))
            return httpx.Response(200, json={"success": True, "message": "Processed 2 new email(s)"})

        forwarder = PushForwarder(
            "https://relay.example/exec", "KEY", client=httpx.Client(transport=httpx.MockTransport(handler))
        )

        result = forwarder.forward(envelope({"emailAddress": "user@x.com", "historyId": 100}))

        assert result.forwarded is True
        assert result.success is True
        assert posted == [
            {
                "apiKey": "KEY",
                "task": "processNewEmails",
                "data": {"emailAddress": "user@x.com", "historyId": "100"},
            }
        ]

    def test_does_not_forward_invalid_payload(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("should not be called")

        forwarder = PushForwarder("https://relay.example", "KEY", client=httpx.Client(transport=httpx.MockTransport(handler)))

        result = forwarder.forward(envelope({"emailAddress": "user@x.com"}))

        assert result.forwarded is False
        assert result.error == "InvalidPayload"

    def test_non_json_response(self) -> None:
        forwarder = PushForwarder(
            "https://relay.example",
            "KEY",
            client=httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(502, text="Bad Gateway"))),
        )

        result = forwarder.forward(envelope({"emailAddress": "a@b.c", "historyId": "1"}))

        assert result.forwarded is True
        assert result.status_code == 502
        assert result.success is None

    def test_requires_url(self) -> None:
        with pytest.raises(ConfigurationError):
            PushForwarder("", "KEY")
