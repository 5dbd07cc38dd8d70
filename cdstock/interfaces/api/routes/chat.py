"""Routes for direct chat between users."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from cdstock.application.use_cases.chat import (
    count_unread_messages,
    list_conversation,
    mark_conversation_read,
    send_or_queue_message,
)
from cdstock.application.use_cases.users import list_contacts
from cdstock.domain.entities import OutgoingMessage, User
from cdstock.domain.errors import CDStockError
from cdstock.infrastructure.database import get_db
from cdstock.infrastructure.offline_queue import OfflineQueue, get_offline_queue
from cdstock.interfaces.api.dependencies import get_current_active_user
from cdstock.interfaces.api.routes_helpers import to_http_exception
from cdstock.interfaces.api.schemas import (
    ChatMessageCreate,
    ChatMessageRead,
    QueuedChatMessageRead,
    UnreadCountRead,
    UserSummaryRead,
)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/contacts", response_model=list[UserSummaryRead])
def contacts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Users the caller can start a conversation with."""

    users = list_contacts(db, current_user=current_user)
    return [UserSummaryRead.model_validate(user) for user in users]


@router.post(
    "/messages",
    response_model=ChatMessageRead | QueuedChatMessageRead,
    status_code=status.HTTP_201_CREATED,
)
def post_message(
    payload: ChatMessageCreate,
    response: Response,
    db: Session = Depends(get_db),
    queue: OfflineQueue | None = Depends(get_offline_queue),
    current_user: User = Depends(get_current_active_user),
):
    """Send a message. When the store is down it is queued and answered with 202."""

    try:
        message = send_or_queue_message(
            db,
            sender_id=current_user.id,
            recipient_id=payload.recipient_id,
            body=payload.body,
            queue=queue,
        )
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    if isinstance(message, OutgoingMessage):
        response.status_code = status.HTTP_202_ACCEPTED
        return QueuedChatMessageRead.model_validate(message)
    return ChatMessageRead.model_validate(message)


@router.get("/conversations/{user_id}", response_model=list[ChatMessageRead])
def conversation(
    user_id: str,
    mark_read: bool = Query(True, description="Mark the other user's messages as read"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Messages exchanged with ``user_id``, oldest first."""

    try:
        messages = list_conversation(db, current_user.id, user_id)
        if mark_read:
            mark_conversation_read(db, reader_id=current_user.id, other_id=user_id)
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    return [ChatMessageRead.model_validate(message) for message in messages]


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    try:
        return UnreadCountRead(unread=count_unread_messages(db, current_user.id))
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
