"""Use cases for listing users."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from cdstock.domain.entities import User
from cdstock.infrastructure.repositories import UserRepository

from .permissions import ensure_admin


def list_users(
    session: Session,
    *,
    current_user: User,
    skip: int = 0,
    limit: int = 100,
) -> Sequence[User]:
    """Return registered users respecting pagination parameters."""

    ensure_admin(current_user)
    return UserRepository(session).list(skip=skip, limit=limit)


def list_contacts(session: Session, *, current_user: User) -> Sequence[User]:
    """Return every user the current user can chat with."""

    users = UserRepository(session).list(limit=None)
    return [user for user in users if user.id != current_user.id]
