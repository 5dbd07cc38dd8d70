"""Realtime notification helpers for the infrastructure layer."""

from .bridge import InsertCallback, RealtimeBridge, Subscription, realtime_bridge
from .manager import NotificationConnectionManager, notification_manager
from .publisher import (
    NotificationPublisher,
    notification_publisher,
    serialize_chat_message,
    serialize_notification,
)

__all__ = [
    "InsertCallback",
    "RealtimeBridge",
    "Subscription",
    "realtime_bridge",
    "NotificationConnectionManager",
    "notification_manager",
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
    "serialize_chat_message",
]
