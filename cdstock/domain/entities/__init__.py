"""Domain entities exposed by the application."""

from .broadcast import (
    BroadcastSummary,
    BroadcastTarget,
    BroadcastTargetKind,
    BroadcastTemplate,
)
from .chat_message import (
    ChatMessage,
    DeliveryState,
    Failed,
    OutgoingMessage,
    Pending,
    Sent,
    mark_failed,
    mark_sent,
    retry,
)
from .inbox import Inbox
from .notification import (
    Notification,
    NotificationCategory,
    NotificationPriority,
    ReadReceipt,
)
from .user import ADMIN_ROLES, User, UserRole

__all__ = [
    "ADMIN_ROLES",
    "BroadcastSummary",
    "BroadcastTarget",
    "BroadcastTargetKind",
    "BroadcastTemplate",
    "ChatMessage",
    "DeliveryState",
    "Failed",
    "Inbox",
    "Notification",
    "NotificationCategory",
    "NotificationPriority",
    "OutgoingMessage",
    "Pending",
    "ReadReceipt",
    "Sent",
    "User",
    "UserRole",
    "mark_failed",
    "mark_sent",
    "retry",
]
