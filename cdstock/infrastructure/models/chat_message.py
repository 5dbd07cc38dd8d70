"""SQLAlchemy model for direct chat messages."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text

from cdstock.infrastructure.database import Base
from cdstock.utils import now_in_app_naive_datetime


class ChatMessageModel(Base):
    """Database representation of a chat message between two users."""

    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("ix_chat_messages_pair", "user_id", "recipient_id", "created_at"),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    recipient_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    read_at = Column(DateTime(), nullable=True)


__all__ = ["ChatMessageModel"]
