"""ORM models used by the application infrastructure."""

from .chat_message import ChatMessageModel
from .notification import NotificationModel, ReadNotificationModel
from .user import UserModel

__all__ = [
    "ChatMessageModel",
    "NotificationModel",
    "ReadNotificationModel",
    "UserModel",
]
