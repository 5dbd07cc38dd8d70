"""Ephemeral entities describing a broadcast notification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .notification import NotificationCategory, NotificationPriority


class BroadcastTargetKind(str, Enum):
    ALL = "all"
    ADMINS_ONLY = "admins-only"
    SINGLE_USER = "single-user"


@dataclass(frozen=True)
class BroadcastTarget:
    """Selector resolved into concrete recipients when the broadcast runs."""

    kind: BroadcastTargetKind
    user_id: str | None = None

    @classmethod
    def all(cls) -> "BroadcastTarget":
        return cls(BroadcastTargetKind.ALL)

    @classmethod
    def admins_only(cls) -> "BroadcastTarget":
        return cls(BroadcastTargetKind.ADMINS_ONLY)

    @classmethod
    def single_user(cls, user_id: str) -> "BroadcastTarget":
        return cls(BroadcastTargetKind.SINGLE_USER, user_id=user_id)


@dataclass(frozen=True)
class BroadcastTemplate:
    """Fields copied into every notification produced by a broadcast."""

    title: str
    body: str
    priority: NotificationPriority = NotificationPriority.NORMAL
    category: NotificationCategory = NotificationCategory.ADMIN


@dataclass(frozen=True)
class BroadcastSummary:
    """Outcome of a best-effort fan-out."""

    attempted: int
    succeeded: int

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded


__all__ = [
    "BroadcastSummary",
    "BroadcastTarget",
    "BroadcastTargetKind",
    "BroadcastTemplate",
]
