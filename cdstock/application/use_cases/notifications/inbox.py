"""Use cases for a single recipient's notification inbox."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from cdstock.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationPriority,
    ReadReceipt,
    User,
)
from cdstock.domain.errors import AuthorizationError, NotFoundError, ValidationError
from cdstock.infrastructure.notifications import NotificationPublisher, notification_publisher
from cdstock.infrastructure.repositories import NotificationRepository
from cdstock.utils import now_in_app_timezone


def _required(value: str | None, field_name: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"Notification {field_name} is required")
    return cleaned


def create_notification(
    session: Session,
    *,
    recipient_id: str,
    title: str,
    body: str,
    priority: NotificationPriority | str | None = None,
    category: NotificationCategory | str | None = None,
    sender_id: str | None = None,
    notification_id: str | None = None,
    publisher: NotificationPublisher | None = None,
) -> Notification:
    """Persist one notification for ``recipient_id`` and push it to live subscribers."""

    notification = Notification(
        id=notification_id,
        recipient_id=_required(recipient_id, "recipient"),
        title=_required(title, "title"),
        body=_required(body, "body"),
        sender_id=sender_id or None,
        priority=NotificationPriority.coerce(priority),
        category=NotificationCategory.coerce(category),
        created_at=now_in_app_timezone(),
    )
    saved = NotificationRepository(session).create(notification)
    (publisher or notification_publisher).dispatch(saved)
    return saved


def list_notifications(
    session: Session, recipient_id: str, *, limit: int | None = None
) -> Sequence[Notification]:
    """Return the recipient's notifications newest first, each with ``is_read``."""

    return NotificationRepository(session).list_for_recipient(recipient_id, limit=limit)


def count_unread_notifications(session: Session, recipient_id: str) -> int:
    return NotificationRepository(session).count_unread(recipient_id)


def mark_notification_read(
    session: Session, *, recipient_id: str, notification_id: str
) -> ReadReceipt:
    """Record that the recipient read the notification. Repeated calls are harmless."""

    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None or notification.recipient_id != recipient_id:
        raise NotFoundError("Notification not found")
    return repository.upsert_receipt(recipient_id, notification_id)


def mark_all_notifications_read(session: Session, *, recipient_id: str) -> int:
    return NotificationRepository(session).mark_all_read(recipient_id)


def delete_notification(
    session: Session, *, actor: User, recipient_id: str, notification_id: str
) -> bool:
    """Delete a notification from ``recipient_id``'s inbox.

    Only the recipient or an administrator may delete. Unknown ids are a
    successful no-op and return ``False``.
    """

    if actor.id != recipient_id and not actor.is_admin():
        raise AuthorizationError("Only the recipient can delete this notification")
    return NotificationRepository(session).delete(recipient_id, notification_id)


__all__ = [
    "count_unread_notifications",
    "create_notification",
    "delete_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]
