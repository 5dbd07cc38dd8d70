"""Tests for the realtime bridge, the websocket manager and the keyed inbox merge."""

from __future__ import annotations

import asyncio
from operator import itemgetter

from cdstock.domain.entities import Inbox
from cdstock.infrastructure.notifications import NotificationConnectionManager, RealtimeBridge


def _row(row_id: str, row_type: str = "notification") -> dict:
    return {"type": row_type, "data": {"id": row_id}}


def test_subscriber_receives_rows_for_its_recipient_only(bridge):
    received = []
    bridge.subscribe("u1", received.append)

    bridge.publish("u1", _row("a"))
    bridge.publish("u2", _row("b"))

    assert received == [_row("a")]


def test_unsubscribe_is_idempotent(bridge):
    received = []
    subscription = bridge.subscribe("u1", received.append)

    subscription.unsubscribe()
    subscription.unsubscribe()
    bridge.publish("u1", _row("a"))

    assert received == []
    assert subscription.active is False
    assert bridge.subscriber_count("u1") == 0


def test_unsubscribing_one_keeps_the_others(bridge):
    first, second = [], []
    subscription = bridge.subscribe("u1", first.append)
    bridge.subscribe("u1", second.append)

    subscription.unsubscribe()
    delivered = bridge.publish("u1", _row("a"))

    assert delivered == 1
    assert first == []
    assert second == [_row("a")]


def test_failing_callback_does_not_stop_delivery(bridge):
    received = []

    def broken(row):
        raise RuntimeError("listener crashed")

    bridge.subscribe("u1", broken)
    bridge.subscribe("u1", received.append)

    assert bridge.publish("u1", _row("a")) == 1
    assert received == [_row("a")]


def test_inbox_merges_by_id():
    inbox = Inbox(key=itemgetter("id"), sort_key=itemgetter("created_at"), reverse=True)
    fetched = [
        {"id": "n1", "created_at": "2026-01-01T10:00:00", "is_read": False},
        {"id": "n2", "created_at": "2026-01-01T11:00:00", "is_read": False},
    ]

    assert inbox.merge_many(fetched) == fetched
    assert inbox.merge({"id": "n2", "created_at": "2026-01-01T11:00:00", "is_read": True}) is False
    assert inbox.merge({"id": "n3", "created_at": "2026-01-01T12:00:00", "is_read": False})

    assert [row["id"] for row in inbox.items()] == ["n3", "n2", "n1"]
    assert inbox.items()[1]["is_read"] is True
    assert len(inbox) == 3
    assert "n1" in inbox


class FakeWebSocket:
    def __init__(self) -> None:
        self.accepted = False
        self.sent: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        self.sent.append(message)


def test_manager_skips_rows_already_in_snapshot():
    bridge = RealtimeBridge()
    manager = NotificationConnectionManager(bridge)
    websocket = FakeWebSocket()

    async def scenario() -> None:
        await manager.connect("u1", websocket)
        await manager.send_snapshot("u1", websocket, [_row("n1")])
        bridge.publish("u1", _row("n1"))
        bridge.publish("u1", _row("n2"))
        bridge.publish("u1", _row("n2", row_type="chat_message"))
        for _ in range(5):
            await asyncio.sleep(0)

    asyncio.run(scenario())

    assert websocket.accepted
    assert websocket.sent == [
        {"type": "init", "data": [{"id": "n1"}]},
        _row("n2"),
        _row("n2", row_type="chat_message"),
    ]


def test_manager_unsubscribes_after_last_disconnect():
    bridge = RealtimeBridge()
    manager = NotificationConnectionManager(bridge)
    first, second = FakeWebSocket(), FakeWebSocket()

    async def scenario() -> None:
        await manager.connect("u1", first)
        await manager.connect("u1", second)

    asyncio.run(scenario())
    assert bridge.subscriber_count("u1") == 1

    manager.disconnect("u1", first)
    assert manager.is_connected("u1")
    assert bridge.subscriber_count("u1") == 1

    manager.disconnect("u1", second)
    manager.disconnect("u1", second)
    assert not manager.is_connected("u1")
    assert bridge.subscriber_count("u1") == 0
