"""Administrative use cases: role changes, blocking and removal."""

import logging
from dataclasses import replace

from sqlalchemy.orm import Session

from cdstock.domain.entities import User, UserRole
from cdstock.domain.errors import AuthorizationError, ValidationError
from cdstock.infrastructure.repositories import UserRepository

from .get_user import get_user
from .permissions import ensure_admin, ensure_not_self

logger = logging.getLogger(__name__)


def update_user_role(
    session: Session, *, actor: User, user_id: str, role: UserRole | str
) -> User:
    """Assign ``role`` to ``user_id``.

    Only super users may grant or revoke the ``super`` role.
    """

    ensure_admin(actor)
    try:
        new_role = UserRole.parse(role)
    except ValueError as exc:
        raise ValidationError(f"Unknown role '{role}'") from exc
    ensure_not_self(actor, user_id, "change the role of")

    target = get_user(session, user_id)
    touches_super = new_role is UserRole.SUPER or target.is_super()
    if touches_super and not actor.is_super():
        raise AuthorizationError("Only super users can manage the super role")
    if target.role is new_role:
        return target

    logger.info("User %s changed role of %s to %s", actor.id, user_id, new_role.value)
    return UserRepository(session).update(replace(target, role=new_role))


def set_user_blocked(
    session: Session, *, actor: User, user_id: str, blocked: bool
) -> User:
    """Block or unblock ``user_id``. Blocked users cannot sign in."""

    ensure_admin(actor)
    ensure_not_self(actor, user_id, "block")

    target = get_user(session, user_id)
    if target.is_super() and not actor.is_super():
        raise AuthorizationError("Only super users can block a super user")
    if target.is_blocked is blocked:
        return target

    logger.info("User %s set blocked=%s on %s", actor.id, blocked, user_id)
    return UserRepository(session).update(replace(target, is_blocked=blocked))


def delete_user(session: Session, *, actor: User, user_id: str) -> None:
    """Soft delete ``user_id``; existing messages keep referencing the id."""

    ensure_admin(actor)
    ensure_not_self(actor, user_id, "delete")

    target = get_user(session, user_id)
    if target.is_super() and not actor.is_super():
        raise AuthorizationError("Only super users can delete a super user")
    UserRepository(session).delete(user_id)
    logger.info("User %s deleted %s", actor.id, user_id)
