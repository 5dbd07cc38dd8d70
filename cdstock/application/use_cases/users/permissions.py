"""Role checks shared by admin use cases."""

from cdstock.domain.entities import User
from cdstock.domain.errors import AuthorizationError


def ensure_admin(user: User) -> None:
    if not user.is_admin():
        raise AuthorizationError("Administrator privileges are required")


def ensure_not_self(actor: User, target_id: str, action: str) -> None:
    if actor.id == target_id:
        raise AuthorizationError(f"Administrators cannot {action} their own account")
