"""Repository implementations for infrastructure layer."""

from .base import backend_call
from .chat_message_repository import ChatMessageRepository
from .notification_repository import NotificationRepository
from .user_repository import UserRepository

__all__ = [
    "backend_call",
    "ChatMessageRepository",
    "NotificationRepository",
    "UserRepository",
]
