"""Persistence helpers for chat messages."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from cdstock.domain.entities import ChatMessage
from cdstock.infrastructure.models import ChatMessageModel
from cdstock.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    new_id,
    now_in_app_timezone,
)

from .base import backend_call


class ChatMessageRepository:
    """Provide CRUD operations for :class:`ChatMessage` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, message: ChatMessage) -> ChatMessage:
        model = ChatMessageModel(
            id=message.id or new_id(),
            user_id=message.sender_id,
            recipient_id=message.recipient_id,
            message=message.body,
            created_at=ensure_app_naive_datetime(message.created_at)
            or ensure_app_naive_datetime(now_in_app_timezone()),
            read_at=ensure_app_naive_datetime(message.read_at),
        )
        with backend_call(self.session, "send chat message"):
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def get(self, message_id: str) -> ChatMessage | None:
        with backend_call(self.session, "load chat message"):
            model = self.session.get(ChatMessageModel, message_id)
        return self._to_entity(model) if model else None

    def list_conversation(
        self, user_a: str, user_b: str, *, limit: int | None = None
    ) -> Sequence[ChatMessage]:
        """Return messages exchanged in either direction, oldest first."""

        with backend_call(self.session, "list chat messages"):
            query = (
                self.session.query(ChatMessageModel)
                .filter(self._conversation_filter(user_a, user_b))
                .order_by(ChatMessageModel.created_at.asc(), ChatMessageModel.id.asc())
            )
            if limit is not None:
                query = query.limit(limit)
            return [self._to_entity(model) for model in query.all()]

    def count_unread(self, recipient_id: str) -> int:
        with backend_call(self.session, "count chat messages"):
            count = (
                self.session.query(func.count(ChatMessageModel.id))
                .filter(ChatMessageModel.recipient_id == recipient_id)
                .filter(ChatMessageModel.read_at.is_(None))
                .scalar()
            )
        return int(count or 0)

    def mark_read(self, *, reader_id: str, other_id: str) -> int:
        """Stamp unread messages sent by ``other_id`` to ``reader_id``."""

        with backend_call(self.session, "mark chat messages as read"):
            updated = (
                self.session.query(ChatMessageModel)
                .filter(
                    ChatMessageModel.user_id == other_id,
                    ChatMessageModel.recipient_id == reader_id,
                    ChatMessageModel.read_at.is_(None),
                )
                .update(
                    {
                        ChatMessageModel.read_at: ensure_app_naive_datetime(
                            now_in_app_timezone()
                        )
                    },
                    synchronize_session=False,
                )
            )
            self.session.commit()
        return int(updated or 0)

    @staticmethod
    def _conversation_filter(user_a: str, user_b: str):
        return or_(
            and_(ChatMessageModel.user_id == user_a, ChatMessageModel.recipient_id == user_b),
            and_(ChatMessageModel.user_id == user_b, ChatMessageModel.recipient_id == user_a),
        )

    @staticmethod
    def _to_entity(model: ChatMessageModel) -> ChatMessage:
        return ChatMessage(
            id=model.id,
            sender_id=model.user_id,
            recipient_id=model.recipient_id,
            body=model.message,
            created_at=ensure_app_timezone(model.created_at),
            read_at=ensure_app_timezone(model.read_at),
        )


__all__ = ["ChatMessageRepository"]
