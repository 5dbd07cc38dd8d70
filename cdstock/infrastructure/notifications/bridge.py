"""In-process realtime bridge for newly inserted rows."""

from __future__ import annotations

import itertools
import logging
import threading
from collections import defaultdict
from typing import Any, Callable, DefaultDict

logger = logging.getLogger(__name__)

InsertCallback = Callable[[dict[str, Any]], None]


class Subscription:
    """Handle returned by :meth:`RealtimeBridge.subscribe`."""

    def __init__(self, bridge: "RealtimeBridge", recipient_id: str, token: int) -> None:
        self._bridge = bridge
        self.recipient_id = recipient_id
        self._token = token
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        """Stop receiving rows. Calling it again does nothing."""

        if not self._active:
            return
        self._active = False
        self._bridge._remove(self.recipient_id, self._token)


class RealtimeBridge:
    """Deliver inserted notification and chat rows to per-recipient callbacks.

    Callbacks run on the thread that published the row. Rows carry no
    ordering guarantee relative to list calls; consumers merge them by id.
    """

    def __init__(self) -> None:
        self._callbacks: DefaultDict[str, dict[int, InsertCallback]] = defaultdict(dict)
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, recipient_id: str, on_insert: InsertCallback) -> Subscription:
        """Call ``on_insert(row)`` for every row later published to ``recipient_id``."""

        with self._lock:
            token = next(self._tokens)
            self._callbacks[recipient_id][token] = on_insert
        return Subscription(self, recipient_id, token)

    def publish(self, recipient_id: str, row: dict[str, Any]) -> int:
        """Invoke the callbacks registered for ``recipient_id``.

        Returns the number of callbacks that accepted the row.
        """

        with self._lock:
            callbacks = list(self._callbacks.get(recipient_id, {}).values())

        delivered = 0
        for callback in callbacks:
            try:
                callback(row)
            except Exception:
                logger.exception("Realtime subscriber for %s raised", recipient_id)
                continue
            delivered += 1
        return delivered

    def subscriber_count(self, recipient_id: str) -> int:
        with self._lock:
            return len(self._callbacks.get(recipient_id, {}))

    def _remove(self, recipient_id: str, token: int) -> None:
        with self._lock:
            callbacks = self._callbacks.get(recipient_id)
            if callbacks is None:
                return
            callbacks.pop(token, None)
            if not callbacks:
                self._callbacks.pop(recipient_id, None)


realtime_bridge = RealtimeBridge()


__all__ = ["InsertCallback", "RealtimeBridge", "Subscription", "realtime_bridge"]
