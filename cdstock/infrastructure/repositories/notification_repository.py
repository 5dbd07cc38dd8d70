"""Persistence helpers for notification entities and read receipts."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cdstock.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationPriority,
    ReadReceipt,
)
from cdstock.infrastructure.models import NotificationModel, ReadNotificationModel
from cdstock.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    new_id,
    now_in_app_timezone,
)

from .base import backend_call


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_recipient(
        self,
        recipient_id: str,
        *,
        limit: int | None = None,
    ) -> Sequence[Notification]:
        """Return the recipient's notifications newest first with ``is_read`` set."""

        with backend_call(self.session, "list notifications"):
            query = (
                self.session.query(NotificationModel, ReadNotificationModel.notification_id)
                .outerjoin(ReadNotificationModel, self._receipt_join(recipient_id))
                .filter(NotificationModel.user_id == recipient_id)
                .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            )
            if limit is not None:
                query = query.limit(limit)
            rows = query.all()
        return [
            self._to_entity(model, is_read=receipt_id is not None)
            for model, receipt_id in rows
        ]

    def list_unread_for_recipient(
        self, recipient_id: str, *, limit: int | None = 50
    ) -> Sequence[Notification]:
        with backend_call(self.session, "list notifications"):
            query = (
                self.session.query(NotificationModel)
                .outerjoin(ReadNotificationModel, self._receipt_join(recipient_id))
                .filter(NotificationModel.user_id == recipient_id)
                .filter(ReadNotificationModel.notification_id.is_(None))
                .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            )
            if limit is not None:
                query = query.limit(limit)
            return [self._to_entity(model, is_read=False) for model in query.all()]

    def count_unread(self, recipient_id: str) -> int:
        with backend_call(self.session, "count notifications"):
            count = (
                self.session.query(func.count(NotificationModel.id))
                .outerjoin(ReadNotificationModel, self._receipt_join(recipient_id))
                .filter(NotificationModel.user_id == recipient_id)
                .filter(ReadNotificationModel.notification_id.is_(None))
                .scalar()
            )
        return int(count or 0)

    def list_sent_by(
        self,
        sender_id: str,
        *,
        category: NotificationCategory | None = NotificationCategory.ADMIN,
        limit: int | None = 100,
    ) -> Sequence[Notification]:
        with backend_call(self.session, "list sent notifications"):
            query = self.session.query(NotificationModel).filter(
                NotificationModel.sender_id == sender_id
            )
            if category is not None:
                query = query.filter(NotificationModel.type == category.value)
            query = query.order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
            if limit is not None:
                query = query.limit(limit)
            return [self._to_entity(model) for model in query.all()]

    def list_all(self, *, limit: int | None = 200) -> Sequence[Notification]:
        with backend_call(self.session, "list notifications"):
            query = self.session.query(NotificationModel).order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
            if limit is not None:
                query = query.limit(limit)
            return [self._to_entity(model) for model in query.all()]

    def get(self, notification_id: str) -> Notification | None:
        with backend_call(self.session, "load notification"):
            model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        with backend_call(self.session, "create notification"):
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def upsert_receipt(self, recipient_id: str, notification_id: str) -> ReadReceipt:
        """Record a read receipt, keeping the first one when it already exists."""

        with backend_call(self.session, "mark notification as read"):
            existing = self.session.get(
                ReadNotificationModel, (recipient_id, notification_id)
            )
            if existing is not None:
                return self._receipt_to_entity(existing)

            model = ReadNotificationModel(
                user_id=recipient_id,
                notification_id=notification_id,
                read_at=ensure_app_naive_datetime(now_in_app_timezone()),
            )
            self.session.add(model)
            try:
                self.session.commit()
            except IntegrityError:
                # Conflict on the composite key: another writer got there first.
                self.session.rollback()
                model = self.session.get(
                    ReadNotificationModel, (recipient_id, notification_id)
                )
                if model is None:
                    raise
            return self._receipt_to_entity(model)

    def mark_all_read(self, recipient_id: str) -> int:
        """Record a receipt for every unread notification of ``recipient_id``.

        Each row goes through :meth:`upsert_receipt`, so a receipt written
        concurrently (a websocket ack, for instance) is kept as is.
        """

        unread = self.list_unread_for_recipient(recipient_id, limit=None)
        for notification in unread:
            self.upsert_receipt(recipient_id, notification.id)
        return len(unread)

    def delete(self, recipient_id: str, notification_id: str) -> bool:
        """Remove the receipts and then the notification row.

        Returns ``False`` when no row for ``recipient_id`` matched.
        """

        with backend_call(self.session, "delete notification"):
            owned = (
                self.session.query(NotificationModel.id)
                .filter(
                    NotificationModel.id == notification_id,
                    NotificationModel.user_id == recipient_id,
                )
                .first()
            )
            if owned is None:
                self.session.rollback()
                return False

            self.session.query(ReadNotificationModel).filter(
                ReadNotificationModel.notification_id == notification_id,
                ReadNotificationModel.user_id == recipient_id,
            ).delete(synchronize_session=False)
            self.session.query(NotificationModel).filter(
                NotificationModel.id == notification_id
            ).delete(synchronize_session=False)
            self.session.commit()
        return True

    @staticmethod
    def _receipt_join(recipient_id: str):
        return and_(
            ReadNotificationModel.notification_id == NotificationModel.id,
            ReadNotificationModel.user_id == recipient_id,
        )

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        model.id = notification.id or new_id()
        model.created_at = (
            ensure_app_naive_datetime(notification.created_at)
            or ensure_app_naive_datetime(now_in_app_timezone())
        )
        model.user_id = notification.recipient_id
        model.sender_id = notification.sender_id
        model.title = notification.title
        model.message = notification.body
        model.priority = NotificationPriority.coerce(notification.priority).value
        model.type = NotificationCategory.coerce(notification.category).value

    @staticmethod
    def _to_entity(model: NotificationModel, *, is_read: bool = False) -> Notification:
        recipient = model.recipient
        return Notification(
            id=model.id,
            recipient_id=model.user_id,
            sender_id=model.sender_id,
            title=model.title,
            body=model.message,
            priority=NotificationPriority.coerce(model.priority),
            category=NotificationCategory.coerce(model.type),
            created_at=ensure_app_timezone(model.created_at),
            is_read=is_read,
            recipient_name=recipient.name if recipient is not None else None,
        )

    @staticmethod
    def _receipt_to_entity(model: ReadNotificationModel) -> ReadReceipt:
        return ReadReceipt(
            recipient_id=model.user_id,
            notification_id=model.notification_id,
            read_at=ensure_app_timezone(model.read_at),
        )


__all__ = ["NotificationRepository"]
