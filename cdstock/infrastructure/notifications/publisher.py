"""Utility helpers to push inserted rows to realtime subscribers."""

from __future__ import annotations

from typing import Any

from cdstock.domain.entities import ChatMessage, Notification

from .bridge import RealtimeBridge, realtime_bridge


class NotificationPublisher:
    """Serialize notifications and chat messages and hand them to the bridge."""

    def __init__(self, bridge: RealtimeBridge) -> None:
        self._bridge = bridge

    def dispatch(self, notification: Notification) -> int:
        """Deliver ``notification`` to subscribers of its recipient."""

        message = {"type": "notification", "data": serialize_notification(notification)}
        return self._bridge.publish(notification.recipient_id, message)

    def dispatch_chat_message(self, chat_message: ChatMessage) -> int:
        message = {"type": "chat_message", "data": serialize_chat_message(chat_message)}
        return self._bridge.publish(chat_message.recipient_id, message)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "recipient_id": notification.recipient_id,
        "sender_id": notification.sender_id,
        "title": notification.title,
        "body": notification.body,
        "priority": notification.priority.value,
        "category": notification.category.value,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "is_read": notification.is_read,
    }


def serialize_chat_message(chat_message: ChatMessage) -> dict[str, Any]:
    return {
        "id": chat_message.id,
        "sender_id": chat_message.sender_id,
        "recipient_id": chat_message.recipient_id,
        "body": chat_message.body,
        "created_at": chat_message.created_at.isoformat()
        if chat_message.created_at
        else None,
        "read_at": chat_message.read_at.isoformat() if chat_message.read_at else None,
    }


notification_publisher = NotificationPublisher(realtime_bridge)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "serialize_chat_message",
    "serialize_notification",
]
