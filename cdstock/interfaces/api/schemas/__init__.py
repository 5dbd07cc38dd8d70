from .auth import SignUpRequest, Token
from .chat import ChatMessageCreate, ChatMessageRead, QueuedChatMessageRead
from .notification import (
    BroadcastRequest,
    BroadcastSummaryRead,
    MarkedReadRead,
    NotificationCreate,
    NotificationRead,
    UnreadCountRead,
)
from .user import BlockUpdate, ProfileUpdate, RoleUpdate, UserRead, UserSummaryRead

__all__ = [
    "BlockUpdate",
    "BroadcastRequest",
    "BroadcastSummaryRead",
    "ChatMessageCreate",
    "ChatMessageRead",
    "MarkedReadRead",
    "NotificationCreate",
    "NotificationRead",
    "ProfileUpdate",
    "QueuedChatMessageRead",
    "RoleUpdate",
    "SignUpRequest",
    "Token",
    "UnreadCountRead",
    "UserRead",
    "UserSummaryRead",
]
