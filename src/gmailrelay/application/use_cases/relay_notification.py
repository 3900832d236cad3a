"""Relay a Gmail push notification into the sink and chat channels."""

from __future__ import annotations

import uuid
from typing import Any, Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

from loguru import logger

from gmailrelay.application.config import RelayConfig
from gmailrelay.application.ports.cursor_store import CursorStore
from gmailrelay.application.ports.notifier import NotificationChannel
from gmailrelay.application.ports.sink import RowSink
from gmailrelay.application.sync.change_fetcher import ChangeFetcher
from gmailrelay.application.sync.layout import LayoutMap, get_layout
from gmailrelay.application.sync.notification_decoder import NotificationDecoder
from gmailrelay.application.sync.sink_lock import SinkLocks, sink_locks
from gmailrelay.domain.entities.cursor import Cursor
from gmailrelay.domain.entities.notification import Notification
from gmailrelay.domain.entities.record import Record, SinkRow
from gmailrelay.domain.errors import DecodeError, FetchError, StorageError, WriteError
from gmailrelay.domain.models import RelayResult, RunState


class RelayProcessor:
    """Run one notification through decode, fetch, write, notify and advance.

    Flow:
    1. Decode the payload (malformed -> abort, no I/O)
    2. Effective cursor = stored cursor, falling back to the notification's
    3. Fetch added messages since that cursor (listing failure -> abort)
    4. Project records to sink rows; with none, skip to step 7
    5. Append rows as one block after the sink's last row, under the sink lock
    6. Send the aggregated summary to every chat channel (best effort)
    7. Advance the stored cursor to the highest historyId seen

    The cursor only moves after the sink write succeeded, so an interrupted run
    is safe to redeliver. ``process`` never raises; callers get a RelayResult.
    """

    def __init__(
        self,
        cursor_store: CursorStore,
        fetcher: ChangeFetcher,
        sink: RowSink,
        config: RelayConfig,
        channels: Sequence[NotificationChannel] = (),
        decoder: Optional[NotificationDecoder] = None,
        locks: Optional[SinkLocks] = None,
    ) -> None:
        self.cursor_store = cursor_store
        self.fetcher = fetcher
        self.sink = sink
        self.config = config
        self.channels = list(channels)
        self.decoder = decoder or NotificationDecoder()
        self.locks = locks or sink_locks
        self._tz = ZoneInfo(config.timezone)

    @property
    def layout(self) -> LayoutMap:
        return get_layout(self.config.sink_name, self.config.columns)

    def process(self, raw: bytes | str) -> RelayResult:
        """Decode raw push bytes and relay them."""
        run_id = uuid.uuid4().hex[:8]
        self._enter(run_id, RunState.DECODING)
        try:
            notification = self.decoder.decode(raw)
        except DecodeError as e:
            return self._abort(run_id, e)
        return self._run(run_id, notification)

    def process_data(self, data: Mapping[str, Any] | None) -> RelayResult:
        """Relay the ``data`` object of a ``processNewEmails`` task."""
        run_id = uuid.uuid4().hex[:8]
        self._enter(run_id, RunState.DECODING)
        try:
            notification = self.decoder.decode_data(data)
        except DecodeError as e:
            return self._abort(run_id, e)
        return self._run(run_id, notification)

    def relay(self, notification: Notification) -> RelayResult:
        """Relay an already decoded notification."""
        return self._run(uuid.uuid4().hex[:8], notification)

    def _run(self, run_id: str, notification: Notification) -> RelayResult:
        try:
            return self._run_steps(run_id, notification)
        except Exception as e:
            # Anything an adapter failed to translate; the cursor has not moved
            logger.exception(f"[{run_id}] Unexpected error during relay: {e}")
            return self._abort(run_id, e)

    def _run_steps(self, run_id: str, notification: Notification) -> RelayResult:
        logger.info(
            f"[{run_id}] Relaying notification for {notification.origin_identity} "
            f"with historyId {notification.cursor}"
        )

        self._enter(run_id, RunState.RESOLVING_CURSOR)
        try:
            stored = self.cursor_store.get_cursor()
        except StorageError as e:
            return self._abort(run_id, e)
        start = stored if stored is not None else notification.cursor
        logger.debug(f"[{run_id}] Start cursor {start} ({'stored' if stored is not None else 'notification'})")

        self._enter(run_id, RunState.FETCHING)
        try:
            fetched = self.fetcher.fetch(start)
        except FetchError as e:
            return self._abort(run_id, e)
        new_cursor = fetched.new_cursor or start

        self._enter(run_id, RunState.PROJECTING)
        rows = [self.to_sink_row(record) for record in fetched.records]

        if rows:
            self._enter(run_id, RunState.WRITING)
            try:
                self._write(rows)
            except WriteError as e:
                logger.error(
                    f"[{run_id}] Sink write failed after fetching {len(rows)} record(s) "
                    f"from {start} to {new_cursor}; cursor left at {start}, manual reconciliation may be needed"
                )
                return self._abort(run_id, e)

            self._enter(run_id, RunState.NOTIFYING)
            self._notify(run_id, rows)

        self._enter(run_id, RunState.ADVANCING)
        try:
            persisted = self.cursor_store.set_cursor(new_cursor)
        except StorageError as e:
            return self._abort(run_id, e)

        message = (
            self.config.success_message.format(count=len(rows)) if rows else self.config.empty_message
        )
        logger.info(f"[{run_id}] {message}; cursor now {persisted}")
        self._enter(run_id, RunState.IDLE)
        return RelayResult(
            success=True,
            message=message,
            state=RunState.IDLE,
            records=len(rows),
            cursor=str(persisted),
        )

    def to_sink_row(self, record: Record) -> SinkRow:
        received = record.received_at.astimezone(self._tz)
        return SinkRow(
            timestamp=received.strftime(self.config.timestamp_format),
            sender=record.sender,
            subject=record.subject,
        )

    def summary_text(self, rows: Sequence[SinkRow]) -> str:
        parts = [f"{self.config.notification_title} ({len(rows)})"]
        parts.extend(row.summary() for row in rows)
        return "\n\n".join(parts)

    def _write(self, rows: list[SinkRow]) -> None:
        layout = self.layout
        values = layout.project_all(rows)
        try:
            with self.locks.hold(layout.sink_name, timeout=self.config.sink_lock_timeout):
                start_row = self.sink.last_row(layout.sink_name) + 1
                self.sink.write_rows(layout.sink_name, start_row, values)
        except TimeoutError as e:
            raise WriteError(str(e)) from e
        logger.info(f"Appended {len(values)} row(s) to {layout.sink_name} at row {start_row}")

    def _notify(self, run_id: str, rows: list[SinkRow]) -> None:
        if not self.channels:
            return
        text = self.summary_text(rows)
        for channel in self.channels:
            try:
                result = channel.notifier.send(channel.target, text)
            except Exception as e:
                logger.error(f"[{run_id}] {channel.name} notification raised: {e}")
                continue
            if not result.success:
                logger.error(f"[{run_id}] {channel.name} notification failed: {result.error}")

    def _enter(self, run_id: str, state: RunState) -> None:
        logger.debug(f"[{run_id}] -> {state.value}")

    def _abort(self, run_id: str, error: Exception) -> RelayResult:
        reason = getattr(error, "reason", type(error).__name__)
        logger.error(f"[{run_id}] Relay aborted ({reason}): {error}")
        return RelayResult(
            success=False,
            message=self.config.failure_message,
            state=RunState.ABORTED,
            error_reason=reason,
        )
