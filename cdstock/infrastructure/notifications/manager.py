"""Connection management helpers for notification websockets."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from functools import partial
from typing import Any, DefaultDict, Iterable

from fastapi import WebSocket

from cdstock.domain.entities import Inbox

from .bridge import RealtimeBridge, Subscription, realtime_bridge

logger = logging.getLogger(__name__)


def _row_key(row: dict[str, Any]) -> tuple[str, Any]:
    return row.get("type", ""), (row.get("data") or {}).get("id")


class NotificationConnectionManager:
    """Manage active websocket connections grouped by user.

    Each connected user holds one bridge subscription. Every connection keeps
    an :class:`Inbox` so a row already sent in the initial snapshot is not
    pushed a second time.
    """

    def __init__(self, bridge: RealtimeBridge) -> None:
        self._bridge = bridge
        self._connections: DefaultDict[str, dict[WebSocket, Inbox]] = defaultdict(dict)
        self._subscriptions: dict[str, Subscription] = {}
        self._loop: asyncio.AbstractEventLoop | None = None

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it for ``user_id``."""

        await websocket.accept()
        self._loop = asyncio.get_running_loop()
        self._connections[user_id][websocket] = Inbox(key=_row_key)
        if user_id not in self._subscriptions:
            self._subscriptions[user_id] = self._bridge.subscribe(
                user_id, partial(self._on_insert, user_id)
            )

    def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the pool for ``user_id``."""

        connections = self._connections.get(user_id)
        if connections is None:
            return
        connections.pop(websocket, None)
        if not connections:
            self._connections.pop(user_id, None)
            subscription = self._subscriptions.pop(user_id, None)
            if subscription is not None:
                subscription.unsubscribe()

    def is_connected(self, user_id: str) -> bool:
        return bool(self._connections.get(user_id))

    async def send_snapshot(
        self, user_id: str, websocket: WebSocket, rows: Iterable[dict[str, Any]]
    ) -> None:
        """Send the ``init`` message and remember which rows it contained."""

        rows = list(rows)
        inbox = self._connections.get(user_id, {}).get(websocket)
        if inbox is not None:
            inbox.merge_many(rows)
        await websocket.send_json({"type": "init", "data": [row["data"] for row in rows]})

    async def send_to_user(self, user_id: str, message: dict[str, Any]) -> None:
        """Send ``message`` to every active connection for ``user_id`` that has not seen it."""

        connections = list(self._connections.get(user_id, {}).items())
        for connection, inbox in connections:
            if not inbox.merge(message):
                continue
            try:
                await connection.send_json(message)
            except Exception as exc:
                logger.warning("Dropping websocket for %s after send failure: %s", user_id, exc)
                self.disconnect(user_id, connection)

    def _on_insert(self, user_id: str, row: dict[str, Any]) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.warning("No event loop to deliver realtime row to %s", user_id)
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            loop.create_task(self.send_to_user(user_id, row))
        else:
            asyncio.run_coroutine_threadsafe(self.send_to_user(user_id, row), loop)


notification_manager = NotificationConnectionManager(realtime_bridge)


__all__ = ["NotificationConnectionManager", "notification_manager"]
