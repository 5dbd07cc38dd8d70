"""Use cases for direct chat."""

from .messages import (
    count_unread_messages,
    list_conversation,
    mark_conversation_read,
    send_message,
    send_or_queue_message,
    send_outgoing,
)

__all__ = [
    "count_unread_messages",
    "list_conversation",
    "mark_conversation_read",
    "send_message",
    "send_or_queue_message",
    "send_outgoing",
]
