"""Use cases for creating users."""

from sqlalchemy.orm import Session

from cdstock.domain.entities import User, UserRole
from cdstock.domain.errors import ValidationError
from cdstock.infrastructure.repositories import UserRepository
from cdstock.infrastructure.security import get_password_hash
from cdstock.utils import now_in_app_timezone

from .validators import ensure_display_name, ensure_valid_email, ensure_valid_password


def create_user(
    session: Session,
    *,
    email: str,
    password: str,
    name: str | None = None,
    phone: str | None = None,
    role: UserRole | str = UserRole.NORMAL,
    user_id: str | None = None,
) -> User:
    """Create a new user ensuring unique email addresses."""

    normalized_email = ensure_valid_email(email)
    ensure_valid_password(password)
    try:
        parsed_role = UserRole.parse(role)
    except ValueError as exc:
        raise ValidationError(f"Unknown role '{role}'") from exc

    repository = UserRepository(session)
    if repository.get_by_email(normalized_email, include_deleted=True):
        raise ValidationError("Email address is already registered")

    user = User(
        id=user_id,
        email=normalized_email,
        name=ensure_display_name(name, fallback=normalized_email.split("@", 1)[0]),
        role=parsed_role,
        password=get_password_hash(password),
        phone=(phone or "").strip() or None,
        created_at=now_in_app_timezone(),
    )
    return repository.create(user)


def register_user(
    session: Session,
    *,
    email: str,
    password: str,
    name: str | None = None,
    phone: str | None = None,
) -> User:
    """Self sign-up; new accounts always start with the ``normal`` role."""

    return create_user(
        session,
        email=email,
        password=password,
        name=name,
        phone=phone,
        role=UserRole.NORMAL,
    )
