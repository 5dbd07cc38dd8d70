"""Administrative views over notifications."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from cdstock.domain.entities import Notification, User
from cdstock.infrastructure.repositories import NotificationRepository

from cdstock.application.use_cases.users.permissions import ensure_admin


def list_sent_notifications(
    session: Session, *, actor: User, limit: int | None = 100
) -> Sequence[Notification]:
    """Return the admin notifications ``actor`` sent, newest first."""

    ensure_admin(actor)
    return NotificationRepository(session).list_sent_by(actor.id, limit=limit)


def list_all_notifications(
    session: Session, *, actor: User, limit: int | None = 200
) -> Sequence[Notification]:
    ensure_admin(actor)
    return NotificationRepository(session).list_all(limit=limit)
