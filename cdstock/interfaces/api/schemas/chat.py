"""Chat message schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChatMessageCreate(BaseModel):
    recipient_id: str
    body: str = Field(..., max_length=4000)


class ChatMessageRead(BaseModel):
    id: str
    sender_id: str
    recipient_id: str
    body: str
    created_at: datetime
    read_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class QueuedChatMessageRead(BaseModel):
    """Message kept in the offline queue until the store accepts it."""

    local_id: str
    sender_id: str
    recipient_id: str
    body: str
    created_at: datetime
    status: str

    model_config = ConfigDict(from_attributes=True)
