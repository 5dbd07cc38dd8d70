"""Endpoints and websocket handler for notifications."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from cdstock.application.use_cases.notifications import (
    broadcast_notification,
    count_unread_notifications,
    create_notification as create_notification_uc,
    delete_notification as delete_notification_uc,
    list_all_notifications,
    list_notifications as list_notifications_uc,
    list_sent_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from cdstock.domain.entities import BroadcastTemplate, Notification, NotificationPriority, User
from cdstock.domain.errors import CDStockError
from cdstock.infrastructure.database import SessionLocal, get_db
from cdstock.infrastructure.notifications import notification_manager, serialize_notification
from cdstock.infrastructure.repositories import NotificationRepository
from cdstock.interfaces.api.dependencies import (
    get_current_active_user,
    require_admin,
    resolve_current_user,
)
from cdstock.interfaces.api.routes_helpers import to_http_exception
from cdstock.interfaces.api.schemas import (
    BroadcastRequest,
    BroadcastSummaryRead,
    MarkedReadRead,
    NotificationCreate,
    NotificationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    """Return the authenticated user's notifications, newest first."""

    try:
        notifications = list_notifications_uc(db, current_user.id, limit=limit)
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    try:
        return UnreadCountRead(unread=count_unread_notifications(db, current_user.id))
    except CDStockError as exc:
        raise to_http_exception(exc) from exc


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Send a notification to one recipient."""

    try:
        notification = create_notification_uc(
            db,
            recipient_id=payload.recipient_id,
            title=payload.title,
            body=payload.body,
            priority=payload.priority,
            category=payload.category,
            sender_id=current_user.id,
        )
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    return _notification_to_schema(notification)


@router.post("/broadcast", response_model=BroadcastSummaryRead)
def broadcast(
    payload: BroadcastRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Fan a notification out to all users, admins only, or a single user."""

    template = BroadcastTemplate(
        title=payload.title.strip(),
        body=payload.body.strip(),
        priority=NotificationPriority.coerce(payload.priority),
    )
    try:
        summary = broadcast_notification(
            db, template=template, target=payload.to_target(), sender=current_user
        )
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    return BroadcastSummaryRead(
        attempted=summary.attempted, succeeded=summary.succeeded, failed=summary.failed
    )


@router.get("/sent", response_model=list[NotificationRead])
def sent_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Admin notifications sent by the current administrator."""

    notifications = list_sent_notifications(db, actor=current_user)
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/all", response_model=list[NotificationRead])
def all_notifications(
    limit: int = Query(default=200, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    notifications = list_all_notifications(db, actor=current_user, limit=limit)
    return [_notification_to_schema(notification) for notification in notifications]


@router.post("/read-all", response_model=MarkedReadRead)
def read_all(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    try:
        marked = mark_all_notifications_read(db, recipient_id=current_user.id)
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    return MarkedReadRead(marked=marked)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def read_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    try:
        mark_notification_read(
            db, recipient_id=current_user.id, notification_id=notification_id
        )
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    recipient_id: str | None = Query(
        default=None, description="Inbox to delete from; administrators only"
    ),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    try:
        delete_notification_uc(
            db,
            actor=current_user,
            recipient_id=recipient_id or current_user.id,
            notification_id=notification_id,
        )
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications and chat messages to the user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        if user.is_blocked:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is blocked")
    except HTTPException:
        session.close()
        await websocket.close(code=1008)
        return
    except CDStockError as exc:
        session.close()
        logger.warning("Could not authenticate notification websocket: %s", exc)
        await websocket.close(code=1011)
        return

    # Subscribe before reading the snapshot so nothing inserted in between is missed.
    await notification_manager.connect(user.id, websocket)
    try:
        try:
            pending_notifications = NotificationRepository(session).list_unread_for_recipient(
                user.id
            )
        except CDStockError as exc:
            logger.warning("Could not load notifications for %s: %s", user.id, exc)
            notification_manager.disconnect(user.id, websocket)
            await websocket.close(code=1011)
            return
        finally:
            session.close()
        await notification_manager.send_snapshot(
            user.id,
            websocket,
            (
                {"type": "notification", "data": serialize_notification(notification)}
                for notification in pending_notifications
            ),
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    _acknowledge(user.id, [str(notification_id) for notification_id in ids])
                continue
    except WebSocketDisconnect:
        notification_manager.disconnect(user.id, websocket)
    except Exception:
        notification_manager.disconnect(user.id, websocket)
        raise


def _acknowledge(user_id: str, notification_ids: list[str]) -> None:
    ack_session = SessionLocal()
    try:
        for notification_id in notification_ids:
            try:
                mark_notification_read(
                    ack_session, recipient_id=user_id, notification_id=notification_id
                )
            except CDStockError as exc:
                logger.warning("Ignoring ack of %s from %s: %s", notification_id, user_id, exc)
    finally:
        ack_session.close()
