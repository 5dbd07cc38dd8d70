"""Tests for the chat message use cases."""

from __future__ import annotations

import pytest

from cdstock.application.use_cases.chat import (
    count_unread_messages,
    list_conversation,
    mark_conversation_read,
    send_message,
)
from cdstock.domain.errors import NotFoundError, ValidationError
from cdstock.infrastructure.models import ChatMessageModel
from cdstock.infrastructure.repositories import UserRepository


@pytest.fixture()
def people(make_user):
    return make_user("alice"), make_user("bob"), make_user("carol")


def _send(session, publisher, sender, recipient, body):
    return send_message(
        session, sender_id=sender, recipient_id=recipient, body=body, publisher=publisher
    )


def test_conversation_in_chat_log_order(session, people, publisher):
    _send(session, publisher, "alice", "bob", "hi")
    _send(session, publisher, "bob", "alice", "hello")

    bodies = [message.body for message in list_conversation(session, "alice", "bob")]

    assert bodies == ["hi", "hello"]


def test_conversation_is_symmetric(session, people, publisher):
    _send(session, publisher, "alice", "bob", "one")
    _send(session, publisher, "bob", "alice", "two")
    _send(session, publisher, "alice", "carol", "elsewhere")

    forward = [message.id for message in list_conversation(session, "alice", "bob")]
    backward = [message.id for message in list_conversation(session, "bob", "alice")]

    assert forward == backward
    assert len(forward) == 2


def test_self_addressed_message_is_rejected(session, people, publisher):
    with pytest.raises(ValidationError):
        _send(session, publisher, "alice", "alice", "note to self")

    assert session.query(ChatMessageModel).count() == 0


@pytest.mark.parametrize("body", ["", "   ", "\n\t"])
def test_blank_body_is_rejected(session, people, publisher, body):
    with pytest.raises(ValidationError):
        _send(session, publisher, "alice", "bob", body)


def test_body_is_trimmed(session, people, publisher):
    message = _send(session, publisher, "alice", "bob", "  hi there  ")

    assert message.body == "hi there"


def test_unknown_recipient(session, people, publisher):
    with pytest.raises(NotFoundError):
        _send(session, publisher, "alice", "ghost", "anyone there?")


def test_deleted_recipient_counts_as_absent(session, people, publisher):
    UserRepository(session).delete("bob")

    with pytest.raises(NotFoundError):
        _send(session, publisher, "alice", "bob", "still around?")


def test_unread_count_uses_read_flag(session, people, publisher):
    _send(session, publisher, "alice", "bob", "one")
    _send(session, publisher, "carol", "bob", "two")
    _send(session, publisher, "bob", "alice", "reply")

    assert count_unread_messages(session, "bob") == 2

    assert mark_conversation_read(session, reader_id="bob", other_id="alice") == 1

    assert count_unread_messages(session, "bob") == 1
    assert count_unread_messages(session, "alice") == 1


def test_sent_message_is_pushed_to_recipient(session, people, publisher, bridge):
    received = []
    bridge.subscribe("bob", received.append)
    bridge.subscribe("alice", received.append)

    message = _send(session, publisher, "alice", "bob", "hi")

    assert received == [
        {
            "type": "chat_message",
            "data": {
                "id": message.id,
                "sender_id": "alice",
                "recipient_id": "bob",
                "body": "hi",
                "created_at": message.created_at.isoformat(),
                "read_at": None,
            },
        }
    ]
