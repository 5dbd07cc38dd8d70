"""Use case for authenticating a user."""

from enum import Enum, auto

from sqlalchemy.orm import Session

from cdstock.domain.entities import User
from cdstock.infrastructure.repositories import UserRepository
from cdstock.infrastructure.security import verify_password


class AuthenticationStatus(Enum):
    """Possible outcomes when attempting to authenticate a user."""

    SUCCESS = auto()
    INVALID_CREDENTIALS = auto()
    BLOCKED = auto()


def authenticate_user(
    session: Session, email: str, password: str
) -> tuple[User | None, AuthenticationStatus]:
    """Return the authentication result along with the user when possible."""

    repository = UserRepository(session)
    user = repository.get_by_email(email)

    if not user:
        return None, AuthenticationStatus.INVALID_CREDENTIALS

    if not verify_password(password, user.password):
        return None, AuthenticationStatus.INVALID_CREDENTIALS

    if user.is_blocked:
        return user, AuthenticationStatus.BLOCKED

    return user, AuthenticationStatus.SUCCESS
