"""Use cases for direct chat messages between two users."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from cdstock.domain.entities import ChatMessage, OutgoingMessage
from cdstock.domain.errors import BackendError, NotFoundError, ValidationError
from cdstock.infrastructure.notifications import NotificationPublisher, notification_publisher
from cdstock.infrastructure.offline_queue import OfflineQueue
from cdstock.infrastructure.repositories import ChatMessageRepository, UserRepository
from cdstock.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def send_message(
    session: Session,
    *,
    sender_id: str,
    recipient_id: str,
    body: str,
    message_id: str | None = None,
    publisher: NotificationPublisher | None = None,
) -> ChatMessage:
    """Store a chat message and push it to the recipient's live subscribers.

    The recipient is looked up first because a chat screen may still offer a
    user that was removed elsewhere.
    """

    if not sender_id or not recipient_id:
        raise ValidationError("Sender and recipient are required")
    if sender_id == recipient_id:
        raise ValidationError("Cannot send a message to yourself")
    text = (body or "").strip()
    if not text:
        raise ValidationError("Message cannot be empty")

    recipient = UserRepository(session).get(recipient_id)
    if recipient is None or not recipient.can_receive():
        raise NotFoundError("Recipient not found")

    saved = ChatMessageRepository(session).create(
        ChatMessage(
            id=message_id,
            sender_id=sender_id,
            recipient_id=recipient_id,
            body=text,
            created_at=now_in_app_timezone(),
        )
    )
    (publisher or notification_publisher).dispatch_chat_message(saved)
    return saved


def send_or_queue_message(
    session: Session,
    *,
    sender_id: str,
    recipient_id: str,
    body: str,
    queue: OfflineQueue | None,
    publisher: NotificationPublisher | None = None,
) -> ChatMessage | OutgoingMessage:
    """Send a chat message, queueing it locally when the store is unreachable.

    Validation and missing-recipient errors still propagate. Without a
    ``queue`` a :class:`BackendError` propagates as well.
    """

    try:
        return send_message(
            session,
            sender_id=sender_id,
            recipient_id=recipient_id,
            body=body,
            publisher=publisher,
        )
    except BackendError as exc:
        if queue is None:
            raise
        outgoing = queue.enqueue(sender_id, recipient_id, body.strip())
        logger.warning(
            "Queued chat message %s from %s after store failure: %s",
            outgoing.local_id,
            sender_id,
            exc,
        )
        return outgoing


def send_outgoing(session: Session, outgoing: OutgoingMessage) -> ChatMessage:
    """Send a message that was queued locally, reusing its local id.

    A row already stored under that id means an earlier flush got through,
    so it is returned as is.
    """

    existing = ChatMessageRepository(session).get(outgoing.local_id)
    if existing is not None:
        return existing

    return send_message(
        session,
        sender_id=outgoing.sender_id,
        recipient_id=outgoing.recipient_id,
        body=outgoing.body,
        message_id=outgoing.local_id,
    )


def list_conversation(
    session: Session, user_a: str, user_b: str, *, limit: int | None = None
) -> Sequence[ChatMessage]:
    """Return both directions of the ``user_a``/``user_b`` conversation, oldest first."""

    return ChatMessageRepository(session).list_conversation(user_a, user_b, limit=limit)


def count_unread_messages(session: Session, recipient_id: str) -> int:
    return ChatMessageRepository(session).count_unread(recipient_id)


def mark_conversation_read(session: Session, *, reader_id: str, other_id: str) -> int:
    return ChatMessageRepository(session).mark_read(reader_id=reader_id, other_id=other_id)


__all__ = [
    "count_unread_messages",
    "list_conversation",
    "mark_conversation_read",
    "send_message",
    "send_or_queue_message",
    "send_outgoing",
]
