"""Decode Gmail push payloads into typed notifications.

Gmail publishes ``{"emailAddress": ..., "historyId": ...}`` to Pub/Sub; Pub/Sub
push delivers it base64-encoded inside ``{"message": {"data": ...}}``. Nothing
here performs I/O, so a malformed payload is rejected before the relay touches
the state store or the Gmail API.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from gmailrelay.domain.entities.cursor import Cursor
from gmailrelay.domain.entities.notification import Notification
from gmailrelay.domain.errors import DecodeError


class GmailPushData(BaseModel):
    """The JSON object Gmail publishes for a mailbox change."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    emailAddress: StrictStr = Field(min_length=1)
    historyId: Union[StrictInt, StrictStr]


class PubSubMessage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    data: str | None = None
    message_id: str | None = Field(default=None, alias="messageId")
    publish_time: str | None = Field(default=None, alias="publishTime")
    attributes: dict[str, str] = Field(default_factory=dict)


class PubSubEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: PubSubMessage | None = None
    subscription: str | None = None


class NotificationDecoder:
    """Validates push payloads. Stateless; one instance can be shared."""

    def decode(self, raw: bytes | str) -> Notification:
        try:
            payload = GmailPushData.model_validate_json(raw)
        except ValidationError as e:
            raise DecodeError(f"Invalid notification payload: {e.error_count()} error(s)") from e
        return self._to_notification(payload)

    def decode_data(self, data: Mapping[str, Any] | None) -> Notification:
        """Same validation for an already-parsed object (task endpoint ``data``)."""
        if not isinstance(data, Mapping):
            raise DecodeError("Notification data must be an object")
        try:
            payload = GmailPushData.model_validate(dict(data))
        except ValidationError as e:
            raise DecodeError(f"Invalid notification payload: {e.error_count()} error(s)") from e
        return self._to_notification(payload)

    def _to_notification(self, payload: GmailPushData) -> Notification:
        history_id = str(payload.historyId).strip()
        if not history_id:
            raise DecodeError("historyId is empty")
        try:
            cursor = Cursor(history_id)
        except ValueError as e:
            raise DecodeError(str(e)) from e
        return Notification(origin_identity=payload.emailAddress, cursor=cursor)


def unwrap_push_envelope(envelope: Mapping[str, Any] | None) -> bytes:
    """Return the decoded ``message.data`` bytes of a Pub/Sub push envelope."""
    if not isinstance(envelope, Mapping):
        raise DecodeError("Push envelope must be an object")
    try:
        parsed = PubSubEnvelope.model_validate(dict(envelope))
    except ValidationError as e:
        raise DecodeError("Malformed push envelope") from e

    if parsed.message is None or not parsed.message.data:
        raise DecodeError("No message data found")

    try:
        return base64.b64decode(parsed.message.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError("Message data is not valid base64") from e
