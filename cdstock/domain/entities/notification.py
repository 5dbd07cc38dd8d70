"""Domain entities for notifications and their read receipts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationPriority(str, Enum):
    NORMAL = "normal"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def coerce(cls, value: str | None) -> "NotificationPriority":
        """Map ``value`` to a priority, defaulting to ``normal``.

        ``low`` shares the ``normal`` level. Missing or unknown values are
        treated as ``normal`` as well.
        """

        if isinstance(value, cls):
            return value
        normalized = (value or "").strip().lower()
        if normalized == "low":
            return cls.NORMAL
        try:
            return cls(normalized)
        except ValueError:
            return cls.NORMAL


class NotificationCategory(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"
    ADMIN = "admin"
    SYSTEM = "system"

    @classmethod
    def coerce(cls, value: str | None) -> "NotificationCategory":
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.INFO


@dataclass
class Notification:
    """Directed message delivered to exactly one recipient.

    ``is_read`` is derived from the recipient's read receipts when the
    notification is listed; it is never stored on the notification row.
    """

    id: str | None
    recipient_id: str
    title: str
    body: str
    sender_id: str | None = None
    priority: NotificationPriority = NotificationPriority.NORMAL
    category: NotificationCategory = NotificationCategory.INFO
    created_at: datetime | None = None
    is_read: bool = False
    recipient_name: str | None = None


@dataclass(frozen=True)
class ReadReceipt:
    """Record that ``recipient_id`` has read ``notification_id``."""

    recipient_id: str
    notification_id: str
    read_at: datetime


__all__ = [
    "Notification",
    "NotificationCategory",
    "NotificationPriority",
    "ReadReceipt",
]
