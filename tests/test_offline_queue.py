"""Tests for the local offline chat queue and the delivery state machine."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cdstock.application.use_cases.chat import (
    list_conversation,
    send_or_queue_message,
    send_outgoing,
)
from cdstock.domain.entities import (
    ChatMessage,
    Failed,
    OutgoingMessage,
    Pending,
    Sent,
    mark_failed,
    mark_sent,
    retry,
)
from cdstock.domain.errors import BackendError
from cdstock.config import get_settings
from cdstock.infrastructure.offline_queue import OfflineQueue, get_offline_queue
from cdstock.infrastructure.repositories import ChatMessageRepository


def test_delivery_state_transitions():
    state = Pending()

    failed = mark_failed(state, "offline")
    assert failed == Failed(reason="offline")
    assert retry(failed) == Pending()

    sent = mark_sent(retry(failed), "srv-1")
    assert sent == Sent(server_id="srv-1")

    with pytest.raises(ValueError):
        mark_failed(sent, "too late")
    with pytest.raises(ValueError):
        mark_sent(sent, "srv-2")
    with pytest.raises(ValueError):
        retry(Pending())


def test_outgoing_status_labels():
    message = OutgoingMessage(
        local_id="l1",
        sender_id="alice",
        recipient_id="bob",
        body="hi",
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )

    assert message.status == "sending"
    assert message.with_state(Sent("s1")).status == "delivered"
    assert message.with_state(Failed("x")).status == "failed"


def _accept_all(entry: OutgoingMessage) -> ChatMessage:
    return ChatMessage(
        id=f"srv-{entry.local_id}",
        sender_id=entry.sender_id,
        recipient_id=entry.recipient_id,
        body=entry.body,
    )


def test_queue_survives_reopening(tmp_path):
    path = tmp_path / "outbox.json"
    OfflineQueue(path).enqueue("alice", "bob", "first")
    OfflineQueue(path).enqueue("alice", "bob", "second")

    reopened = OfflineQueue(path)

    assert [entry.body for entry in reopened.pending()] == ["first", "second"]
    assert all(isinstance(entry.state, Pending) for entry in reopened.pending())


def test_flush_sends_in_insertion_order(tmp_path):
    queue = OfflineQueue(tmp_path / "outbox.json")
    for body in ("one", "two", "three"):
        queue.enqueue("alice", "bob", body)
    order: list[str] = []

    def send(entry):
        order.append(entry.body)
        return _accept_all(entry)

    result = queue.flush(send)

    assert order == ["one", "two", "three"]
    assert [entry.state for entry in result.sent] == [
        Sent(server_id=f"srv-{entry.local_id}") for entry in result.sent
    ]
    assert len(queue) == 0


def test_failed_entries_stay_queued(tmp_path):
    queue = OfflineQueue(tmp_path / "outbox.json")
    queue.enqueue("alice", "bob", "ok")
    queue.enqueue("alice", "ghost", "lost")

    def send(entry):
        if entry.recipient_id == "ghost":
            raise BackendError("Could not send chat message: offline")
        return _accept_all(entry)

    result = queue.flush(send)

    assert [entry.body for entry in result.sent] == ["ok"]
    remaining = queue.pending()
    assert [entry.body for entry in remaining] == ["lost"]
    assert remaining[0].status == "failed"
    assert "offline" in remaining[0].state.reason

    second = queue.flush(_accept_all)
    assert [entry.body for entry in second.sent] == ["lost"]
    assert len(queue) == 0


def test_concurrent_flush_is_skipped(tmp_path):
    queue = OfflineQueue(tmp_path / "outbox.json")
    queue.enqueue("alice", "bob", "hi")
    calls: list[str] = []

    def reentrant_send(entry):
        calls.append(entry.body)
        nested = queue.flush(_accept_all)
        assert nested.skipped
        return _accept_all(entry)

    result = queue.flush(reentrant_send)

    assert calls == ["hi"]
    assert not result.skipped
    assert len(result.sent) == 1


def test_flush_through_chat_use_case(tmp_path, session, make_user):
    make_user("alice")
    make_user("bob")
    queue = OfflineQueue(tmp_path / "outbox.json")
    queued = queue.enqueue("alice", "bob", "written offline")

    result = queue.flush(lambda entry: send_outgoing(session, entry))

    assert result.sent[0].state == Sent(server_id=queued.local_id)
    assert [message.body for message in list_conversation(session, "bob", "alice")] == [
        "written offline"
    ]


def test_flush_after_partial_delivery_does_not_resend(tmp_path, session, make_user):
    make_user("alice")
    make_user("bob")
    queue = OfflineQueue(tmp_path / "outbox.json")
    queued = queue.enqueue("alice", "bob", "stored before the crash")
    # The row is stored but the entry never left the queue.
    send_outgoing(session, queued)

    result = queue.flush(lambda entry: send_outgoing(session, entry))

    assert [entry.state for entry in result.sent] == [Sent(server_id=queued.local_id)]
    assert result.failed == []
    assert len(queue) == 0
    assert len(list_conversation(session, "alice", "bob")) == 1


def _store_down(self, message):
    raise BackendError("Could not send chat message: database is locked")


def test_store_failure_queues_message(tmp_path, session, make_user, publisher, monkeypatch):
    make_user("alice")
    make_user("bob")
    queue = OfflineQueue(tmp_path / "outbox.json")
    monkeypatch.setattr(ChatMessageRepository, "create", _store_down)

    outgoing = send_or_queue_message(
        session,
        sender_id="alice",
        recipient_id="bob",
        body="  restock flour  ",
        queue=queue,
        publisher=publisher,
    )

    assert isinstance(outgoing, OutgoingMessage)
    assert outgoing.status == "sending"
    assert [entry.body for entry in queue.pending()] == ["restock flour"]

    monkeypatch.undo()
    queue.flush(lambda entry: send_outgoing(session, entry))
    assert [message.id for message in list_conversation(session, "alice", "bob")] == [
        outgoing.local_id
    ]


def test_store_failure_without_queue_propagates(session, make_user, publisher, monkeypatch):
    make_user("alice")
    make_user("bob")
    monkeypatch.setattr(ChatMessageRepository, "create", _store_down)

    with pytest.raises(BackendError):
        send_or_queue_message(
            session,
            sender_id="alice",
            recipient_id="bob",
            body="hi",
            queue=None,
            publisher=publisher,
        )


def test_shared_queue_follows_settings(tmp_path, monkeypatch):
    assert get_offline_queue() is None

    monkeypatch.setenv("OFFLINE_QUEUE_PATH", str(tmp_path / "outbox.json"))
    get_settings.cache_clear()
    try:
        assert get_offline_queue() is get_offline_queue()
        assert get_offline_queue().path == (tmp_path / "outbox.json").resolve()
    finally:
        monkeypatch.delenv("OFFLINE_QUEUE_PATH")
        get_settings.cache_clear()
