"""Public helpers for notification inboxes and broadcasts."""

from .broadcast import broadcast_notification, resolve_recipients
from .history import list_all_notifications, list_sent_notifications
from .inbox import (
    count_unread_notifications,
    create_notification,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)

__all__ = [
    "broadcast_notification",
    "count_unread_notifications",
    "create_notification",
    "delete_notification",
    "list_all_notifications",
    "list_notifications",
    "list_sent_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "resolve_recipients",
]
