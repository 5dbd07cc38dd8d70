"""Use case for self-service profile updates."""

from dataclasses import replace

from sqlalchemy.orm import Session

from cdstock.domain.entities import User
from cdstock.domain.errors import ValidationError
from cdstock.infrastructure.repositories import UserRepository

_UNSET = object()


def update_profile(
    session: Session,
    *,
    current_user: User,
    name: str | None | object = _UNSET,
    phone: str | None | object = _UNSET,
    profile_picture: str | None | object = _UNSET,
) -> User:
    """Update the profile fields the user owns. Role and block flag are untouched."""

    changes: dict[str, object] = {}
    if name is not _UNSET:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Name cannot be empty")
        changes["name"] = cleaned
    if phone is not _UNSET:
        changes["phone"] = (phone or "").strip() or None
    if profile_picture is not _UNSET:
        changes["profile_picture"] = (profile_picture or "").strip() or None

    if not changes:
        return current_user
    return UserRepository(session).update(replace(current_user, **changes))
