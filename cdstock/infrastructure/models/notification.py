"""SQLAlchemy models for notifications and their read receipts."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from cdstock.infrastructure.database import Base
from cdstock.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_created", "user_id", "created_at"),)

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    sender_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(10), nullable=False, default="normal")
    type = Column(String(20), nullable=False, default="info")
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    recipient = relationship("UserModel", foreign_keys=[user_id], lazy="joined")


class ReadNotificationModel(Base):
    """Read receipt keyed on the (recipient, notification) pair."""

    __tablename__ = "read_notifications"

    user_id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    notification_id = Column(
        String(36),
        ForeignKey("notifications.id", ondelete="CASCADE"),
        primary_key=True,
    )
    read_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["NotificationModel", "ReadNotificationModel"]
