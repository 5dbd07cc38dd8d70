"""Fan-out of one admin-authored notification to many recipients."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from cdstock.domain.entities import (
    ADMIN_ROLES,
    BroadcastSummary,
    BroadcastTarget,
    BroadcastTargetKind,
    BroadcastTemplate,
    User,
)
from cdstock.domain.errors import (
    AuthorizationError,
    BackendError,
    ValidationError,
)
from cdstock.infrastructure.notifications import NotificationPublisher
from cdstock.infrastructure.repositories import UserRepository

from .inbox import create_notification

logger = logging.getLogger(__name__)


def resolve_recipients(
    session: Session, *, target: BroadcastTarget, sender: User
) -> list[str]:
    """Expand ``target`` into the concrete recipient ids known right now."""

    repository = UserRepository(session)
    if target.kind is BroadcastTargetKind.ALL:
        return repository.list_ids(exclude=[sender.id] if sender.id else [])
    if target.kind is BroadcastTargetKind.ADMINS_ONLY:
        return repository.list_ids_by_roles(ADMIN_ROLES)
    if target.kind is BroadcastTargetKind.SINGLE_USER:
        user_id = (target.user_id or "").strip()
        if not user_id or repository.get(user_id) is None:
            raise ValidationError("Selected recipient is not a known user")
        return [user_id]
    raise ValidationError(f"Unsupported broadcast target '{target.kind}'")


def broadcast_notification(
    session: Session,
    *,
    template: BroadcastTemplate,
    target: BroadcastTarget,
    sender: User,
    publisher: NotificationPublisher | None = None,
) -> BroadcastSummary:
    """Send ``template`` to every recipient selected by ``target``.

    Only administrators may broadcast. Failures for individual recipients
    are logged and counted; the summary reports how many rows were written.
    """

    if not sender.is_admin():
        raise AuthorizationError("Only administrators can send broadcasts")
    if not template.title.strip() or not template.body.strip():
        raise ValidationError("Broadcast title and body are required")

    recipients = resolve_recipients(session, target=target, sender=sender)

    succeeded = 0
    for recipient_id in recipients:
        try:
            create_notification(
                session,
                recipient_id=recipient_id,
                title=template.title,
                body=template.body,
                priority=template.priority,
                category=template.category,
                sender_id=sender.id,
                publisher=publisher,
            )
        except (ValidationError, BackendError) as exc:
            logger.warning(
                "Broadcast from %s to %s failed: %s", sender.id, recipient_id, exc
            )
            continue
        succeeded += 1

    summary = BroadcastSummary(attempted=len(recipients), succeeded=succeeded)
    logger.info(
        "Broadcast '%s' from %s delivered to %s/%s recipients",
        template.title,
        sender.id,
        summary.succeeded,
        summary.attempted,
    )
    return summary


__all__ = ["broadcast_notification", "resolve_recipients"]
