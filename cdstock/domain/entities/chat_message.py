"""Domain entities for direct chat messages."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Union


@dataclass
class ChatMessage:
    """Message exchanged between two users.

    A conversation is the unordered pair ``{sender_id, recipient_id}``.
    """

    id: str | None
    sender_id: str
    recipient_id: str
    body: str
    created_at: datetime | None = None
    read_at: datetime | None = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


@dataclass(frozen=True)
class Pending:
    """Message written locally and not yet accepted by the store."""


@dataclass(frozen=True)
class Sent:
    server_id: str


@dataclass(frozen=True)
class Failed:
    reason: str


DeliveryState = Union[Pending, Sent, Failed]


def mark_sent(state: DeliveryState, server_id: str) -> Sent:
    """Transition a pending or failed message to :class:`Sent`."""

    if isinstance(state, Sent):
        raise ValueError("Message was already delivered")
    return Sent(server_id=server_id)


def mark_failed(state: DeliveryState, reason: str) -> Failed:
    """Transition a pending or failed message to :class:`Failed`."""

    if isinstance(state, Sent):
        raise ValueError("Delivered messages cannot fail")
    return Failed(reason=reason)


def retry(state: DeliveryState) -> Pending:
    """Return a failed message to :class:`Pending` for another attempt."""

    if not isinstance(state, Failed):
        raise ValueError("Only failed messages can be retried")
    return Pending()


@dataclass
class OutgoingMessage:
    """Chat message tracked on the writer's side until the store accepts it."""

    local_id: str
    sender_id: str
    recipient_id: str
    body: str
    created_at: datetime
    state: DeliveryState = field(default_factory=Pending)

    @property
    def status(self) -> str:
        """Return ``sending``, ``delivered`` or ``failed`` for display."""

        if isinstance(self.state, Sent):
            return "delivered"
        if isinstance(self.state, Failed):
            return "failed"
        return "sending"

    def with_state(self, state: DeliveryState) -> "OutgoingMessage":
        return replace(self, state=state)


__all__ = [
    "ChatMessage",
    "DeliveryState",
    "Failed",
    "OutgoingMessage",
    "Pending",
    "Sent",
    "mark_failed",
    "mark_sent",
    "retry",
]
