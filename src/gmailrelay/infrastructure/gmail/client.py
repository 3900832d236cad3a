"""Gmail API adapters: history listing, message lookup and watch registration."""

from __future__ import annotations

import socket
from typing import Any, Optional, Sequence

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from loguru import logger

from gmailrelay.application.ports.change_log import ChangeLog, HistoryPage
from gmailrelay.application.ports.subscription import Subscription, WatchResponse
from gmailrelay.domain.entities.cursor import Cursor
from gmailrelay.domain.entities.record import ChangeRecord, Record
from gmailrelay.domain.errors import FetchError, ItemResolveError, RelayError
from gmailrelay.infrastructure.gmail.mapper import METADATA_HEADERS, gmail_message_to_record

HISTORY_TYPES = ["messageAdded"]
# Failures below googleapiclient: httplib2 network errors and credential refresh
TRANSPORT_ERRORS = (httplib2.HttpLib2Error, socket.timeout, OSError, GoogleAuthError)


def _status(e: HttpError) -> int:
    return int(getattr(e.resp, "status", 0) or 0)


class GmailChangeLog(ChangeLog):
    """users.history.list + users.messages.get for one mailbox."""

    def __init__(
        self,
        service_factory,
        user_id: str = "me",
        label_id: Optional[str] = None,
        page_size: int = 500,
    ) -> None:
        # service_factory: () -> gmail v1 discovery resource
        self.service_factory = service_factory
        self.user_id = user_id
        self.label_id = label_id
        self.page_size = page_size

    def list_history(self, start: Cursor, page_token: Optional[str] = None) -> HistoryPage:
        params: dict[str, Any] = {
            "userId": self.user_id,
            "startHistoryId": start.value,
            "historyTypes": HISTORY_TYPES,
            "maxResults": self.page_size,
        }
        if self.label_id:
            params["labelId"] = self.label_id
        if page_token:
            params["pageToken"] = page_token

        try:
            resp = self.service_factory().users().history().list(**params).execute()
        except HttpError as e:
            if _status(e) == 404:
                # startHistoryId older than Gmail's retained history
                raise FetchError(f"History {start} is no longer available", reason="HistoryExpired") from e
            raise FetchError(f"history.list failed with HTTP {_status(e)}") from e
        except TRANSPORT_ERRORS as e:
            raise FetchError(f"history.list transport error: {e}") from e

        changes: list[ChangeRecord] = []
        for entry in resp.get("history") or []:
            for added in entry.get("messagesAdded") or []:
                msg = added.get("message") or {}
                if msg.get("id"):
                    changes.append(ChangeRecord(message_id=msg["id"], thread_id=msg.get("threadId")))

        return HistoryPage(
            changes=changes,
            history_id=str(resp["historyId"]) if resp.get("historyId") else None,
            next_page_token=resp.get("nextPageToken"),
        )

    def get_message(self, message_id: str) -> Record:
        try:
            message = (
                self.service_factory()
                .users()
                .messages()
                .get(
                    userId=self.user_id,
                    id=message_id,
                    format="metadata",
                    metadataHeaders=list(METADATA_HEADERS),
                )
                .execute()
            )
        except HttpError as e:
            raise ItemResolveError(message_id, f"messages.get {message_id} failed with HTTP {_status(e)}") from e
        except TRANSPORT_ERRORS as e:
            raise ItemResolveError(message_id, f"messages.get {message_id} transport error: {e}") from e

        try:
            return gmail_message_to_record(message)
        except (KeyError, TypeError, AttributeError) as e:
            raise ItemResolveError(message_id, f"messages.get {message_id} returned an unusable resource: {e}") from e


class GmailSubscription(Subscription):
    """users.watch / users.stop."""

    def __init__(self, service_factory, user_id: str = "me") -> None:
        self.service_factory = service_factory
        self.user_id = user_id

    def subscribe(self, topic: str, label_ids: Sequence[str]) -> WatchResponse:
        body: dict[str, Any] = {"topicName": topic}
        if label_ids:
            body["labelIds"] = list(label_ids)
            body["labelFilterBehavior"] = "include"
        try:
            resp = self.service_factory().users().watch(userId=self.user_id, body=body).execute()
        except (HttpError, *TRANSPORT_ERRORS) as e:
            raise RelayError(f"users.watch failed: {e}", reason="WatchFailed") from e

        logger.debug(f"users.watch response: {resp}")
        try:
            expiration_ms = int(resp["expiration"])
        except (KeyError, TypeError, ValueError) as e:
            raise RelayError(f"users.watch returned no usable expiration: {resp}", reason="WatchFailed") from e
        return WatchResponse(
            expiration_ms=expiration_ms,
            history_id=str(resp["historyId"]) if resp.get("historyId") else None,
        )

    def unsubscribe(self) -> None:
        try:
            self.service_factory().users().stop(userId=self.user_id).execute()
        except (HttpError, *TRANSPORT_ERRORS) as e:
            raise RelayError(f"users.stop failed: {e}", reason="StopFailed") from e
