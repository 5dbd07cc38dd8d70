"""Local durable queue for chat messages written while offline."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from cdstock.domain.entities import (
    ChatMessage,
    Failed,
    OutgoingMessage,
    Pending,
    Sent,
    mark_failed,
    mark_sent,
)
from cdstock.config import get_settings
from cdstock.domain.errors import CDStockError
from cdstock.utils import new_id, now_in_app_timezone

logger = logging.getLogger(__name__)

SendFunction = Callable[[OutgoingMessage], ChatMessage]


@dataclass
class FlushResult:
    """Outcome of one flush pass over the queue."""

    sent: list[OutgoingMessage] = field(default_factory=list)
    failed: list[OutgoingMessage] = field(default_factory=list)
    skipped: bool = False


class OfflineQueue:
    """JSON-file backed list of :class:`OutgoingMessage` entries.

    Entries are flushed in insertion order. Each flush tries every entry once;
    accepted entries are removed and the rest stay queued as ``Failed``.
    Only one flush runs at a time.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._flush_lock = threading.Lock()

    def enqueue(self, sender_id: str, recipient_id: str, body: str) -> OutgoingMessage:
        entry = OutgoingMessage(
            local_id=new_id(),
            sender_id=sender_id,
            recipient_id=recipient_id,
            body=body,
            created_at=now_in_app_timezone(),
        )
        with self._lock:
            entries = self._read()
            entries.append(entry)
            self._write(entries)
        return entry

    def pending(self) -> list[OutgoingMessage]:
        with self._lock:
            return self._read()

    def __len__(self) -> int:
        return len(self.pending())

    def flush(self, send: SendFunction) -> FlushResult:
        """Try to send every queued entry once through ``send``."""

        if not self._flush_lock.acquire(blocking=False):
            logger.info("Offline queue flush already running; skipping")
            return FlushResult(skipped=True)

        try:
            result = FlushResult()
            for entry in self.pending():
                try:
                    saved = send(entry)
                except CDStockError as exc:
                    failed = entry.with_state(mark_failed(entry.state, str(exc)))
                    self._replace(failed)
                    result.failed.append(failed)
                    logger.warning(
                        "Queued chat message %s could not be sent: %s", entry.local_id, exc
                    )
                    continue
                sent = entry.with_state(mark_sent(entry.state, saved.id or ""))
                self._remove(entry.local_id)
                result.sent.append(sent)

            if result.sent or result.failed:
                logger.info(
                    "Offline queue flushed: %s sent, %s still queued",
                    len(result.sent),
                    len(result.failed),
                )
            return result
        finally:
            self._flush_lock.release()

    def _replace(self, updated: OutgoingMessage) -> None:
        with self._lock:
            entries = [
                updated if entry.local_id == updated.local_id else entry
                for entry in self._read()
            ]
            self._write(entries)

    def _remove(self, local_id: str) -> None:
        with self._lock:
            entries = [entry for entry in self._read() if entry.local_id != local_id]
            self._write(entries)

    def _read(self) -> list[OutgoingMessage]:
        if not self.path.exists():
            return []
        raw = self.path.read_text(encoding="utf-8").strip()
        if not raw:
            return []
        return [_entry_from_dict(item) for item in json.loads(raw)]

    def _write(self, entries: list[OutgoingMessage]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([_entry_to_dict(entry) for entry in entries], indent=2)
        # Write to a sibling file first so a crash never leaves a truncated queue.
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
        os.replace(tmp_name, self.path)


def _entry_to_dict(entry: OutgoingMessage) -> dict[str, Any]:
    state: dict[str, Any]
    if isinstance(entry.state, Sent):
        state = {"status": "delivered", "server_id": entry.state.server_id}
    elif isinstance(entry.state, Failed):
        state = {"status": "failed", "reason": entry.state.reason}
    else:
        state = {"status": "sending"}
    return {
        "local_id": entry.local_id,
        "sender_id": entry.sender_id,
        "recipient_id": entry.recipient_id,
        "body": entry.body,
        "created_at": entry.created_at.isoformat(),
        "state": state,
    }


def _entry_from_dict(data: dict[str, Any]) -> OutgoingMessage:
    state_data = data.get("state") or {}
    status = state_data.get("status")
    if status == "delivered":
        state = Sent(server_id=state_data.get("server_id", ""))
    elif status == "failed":
        state = Failed(reason=state_data.get("reason", ""))
    else:
        state = Pending()
    return OutgoingMessage(
        local_id=data["local_id"],
        sender_id=data["sender_id"],
        recipient_id=data["recipient_id"],
        body=data["body"],
        created_at=datetime.fromisoformat(data["created_at"]),
        state=state,
    )


_queues: dict[Path, OfflineQueue] = {}
_queues_lock = threading.Lock()


def get_offline_queue() -> OfflineQueue | None:
    """Return the shared queue for ``OFFLINE_QUEUE_PATH``, or ``None`` when it is unset.

    Callers get one instance per file, so they share its flush lock.
    """

    path = get_settings().offline_queue_path
    if not path:
        return None
    key = Path(path).resolve()
    with _queues_lock:
        queue = _queues.get(key)
        if queue is None:
            queue = _queues[key] = OfflineQueue(key)
        return queue


__all__ = ["FlushResult", "OfflineQueue", "SendFunction", "get_offline_queue"]
