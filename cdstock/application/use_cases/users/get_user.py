"""Use case for retrieving a single user."""

from sqlalchemy.orm import Session

from cdstock.domain.entities import User
from cdstock.domain.errors import NotFoundError
from cdstock.infrastructure.repositories import UserRepository


def get_user(session: Session, user_id: str) -> User:
    """Return the requested user or raise an error if it does not exist."""

    user = UserRepository(session).get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
