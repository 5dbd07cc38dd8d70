"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cdstock.domain.entities import (
    BroadcastTarget,
    BroadcastTargetKind,
    NotificationCategory,
    NotificationPriority,
)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    recipient_id: str
    sender_id: str | None = None
    title: str
    body: str
    priority: NotificationPriority
    category: NotificationCategory
    created_at: datetime
    is_read: bool = False
    recipient_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class NotificationCreate(BaseModel):
    """Payload used by administrators to notify a single recipient."""

    recipient_id: str
    title: str
    body: str
    priority: str | None = None
    category: str | None = None


class BroadcastRequest(BaseModel):
    title: str
    body: str
    priority: str | None = None
    target: Literal["all", "admins-only", "single-user"] = "all"
    user_id: str | None = Field(
        default=None, description="Recipient when ``target`` is ``single-user``"
    )

    @model_validator(mode="after")
    def _single_user_needs_id(self) -> "BroadcastRequest":
        if self.target == BroadcastTargetKind.SINGLE_USER.value and not self.user_id:
            raise ValueError("user_id is required for single-user broadcasts")
        return self

    def to_target(self) -> BroadcastTarget:
        return BroadcastTarget(BroadcastTargetKind(self.target), user_id=self.user_id)


class BroadcastSummaryRead(BaseModel):
    attempted: int
    succeeded: int
    failed: int


class UnreadCountRead(BaseModel):
    unread: int


class MarkedReadRead(BaseModel):
    marked: int


__all__ = [
    "BroadcastRequest",
    "BroadcastSummaryRead",
    "MarkedReadRead",
    "NotificationCreate",
    "NotificationRead",
    "UnreadCountRead",
]
