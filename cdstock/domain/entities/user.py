"""Domain entity representing a user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """Authorization roles a user can hold."""

    NORMAL = "normal"
    ADMIN = "admin"
    SUPER = "super"

    @classmethod
    def parse(cls, value: str | "UserRole") -> "UserRole":
        """Return the role matching ``value`` or raise ``ValueError``."""

        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER})


@dataclass
class User:
    """Core attributes describing an application user."""

    id: str | None
    email: str
    name: str
    role: UserRole
    password: str
    phone: str | None = None
    profile_picture: str | None = None
    is_blocked: bool = False
    deleted: bool = False
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def has_role(self, role: UserRole | str) -> bool:
        """Return ``True`` when the user's role matches ``role``."""

        return self.role == UserRole.parse(role)

    def is_admin(self) -> bool:
        """Return ``True`` for administrators and super users."""

        return self.role in ADMIN_ROLES

    def is_super(self) -> bool:
        return self.role is UserRole.SUPER

    def can_receive(self) -> bool:
        """Return ``True`` when the user is a valid message recipient."""

        return not self.deleted and not self.is_blocked


__all__ = ["ADMIN_ROLES", "User", "UserRole"]
