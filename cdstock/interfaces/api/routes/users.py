"""Routes for user profiles and administration."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from cdstock.application.use_cases.users import (
    delete_user as delete_user_uc,
    list_users as list_users_uc,
    set_user_blocked,
    update_profile,
    update_user_role,
)
from cdstock.domain.entities import User
from cdstock.domain.errors import CDStockError
from cdstock.infrastructure.database import get_db
from cdstock.interfaces.api.dependencies import get_current_active_user, require_admin
from cdstock.interfaces.api.routes_helpers import to_http_exception
from cdstock.interfaces.api.schemas import BlockUpdate, ProfileUpdate, RoleUpdate, UserRead

router = APIRouter(prefix="/users", tags=["users"])


def _to_read_model(user: User) -> UserRead:
    return UserRead.model_validate(user)


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_active_user)):
    """Return the authenticated user."""

    return _to_read_model(current_user)


@router.patch("/me", response_model=UserRead)
def update_current_user(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Update the caller's own profile fields."""

    try:
        user = update_profile(
            db, current_user=current_user, **payload.model_dump(exclude_unset=True)
        )
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    return _to_read_model(user)


@router.get("/", response_model=list[UserRead])
def list_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    users = list_users_uc(db, current_user=current_user, skip=skip, limit=limit)
    return [_to_read_model(user) for user in users]


@router.patch("/{user_id}/role", response_model=UserRead)
def change_role(
    user_id: str,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    try:
        user = update_user_role(db, actor=current_user, user_id=user_id, role=payload.role)
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    return _to_read_model(user)


@router.patch("/{user_id}/block", response_model=UserRead)
def change_block(
    user_id: str,
    payload: BlockUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Block or unblock a user. Blocked users cannot sign in."""

    try:
        user = set_user_blocked(
            db, actor=current_user, user_id=user_id, blocked=payload.is_blocked
        )
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    return _to_read_model(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> Response:
    try:
        delete_user_uc(db, actor=current_user, user_id=user_id)
    except CDStockError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
