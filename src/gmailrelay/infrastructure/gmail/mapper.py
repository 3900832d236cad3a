from __future__ import annotations
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Mapping

from gmailrelay.domain.entities.record import Record

METADATA_HEADERS = ("From", "Subject", "Date")


def _headers(message: Mapping[str, Any]) -> dict[str, str]:
    out: dict[str, str] = {}
    for h in (message.get("payload") or {}).get("headers") or []:
        name = h.get("name")
        if name and name not in out:
            out[name] = (h.get("value") or "").strip()
    return out


def _received_at(message: Mapping[str, Any], headers: Mapping[str, str]) -> datetime:
    # internalDate (epoch ms) is when Gmail received it; Date header is sender-controlled
    internal = message.get("internalDate")
    if internal:
        try:
            return datetime.fromtimestamp(int(internal) / 1000, tz=timezone.utc)
        except (TypeError, ValueError):
            pass
    date_header = headers.get("Date")
    if date_header:
        try:
            parsed = parsedate_to_datetime(date_header)
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except (TypeError, ValueError):
            pass
    return datetime.now(timezone.utc)


def gmail_message_to_record(message: Mapping[str, Any]) -> Record:
    """Map a users.messages.get resource (format=metadata or full) to a Record."""
    headers = _headers(message)
    return Record(
        message_id=message["id"],
        thread_id=message.get("threadId"),
        received_at=_received_at(message, headers),
        sender=headers.get("From", ""),
        subject=headers.get("Subject", ""),
        snippet=message.get("snippet", ""),
        label_ids=tuple(message.get("labelIds") or ()),
        headers=headers,
    )
