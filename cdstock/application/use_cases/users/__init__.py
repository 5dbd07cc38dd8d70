"""Use cases for managing users."""

from .authenticate_user import AuthenticationStatus, authenticate_user
from .create_user import create_user, register_user
from .get_user import get_user
from .list_users import list_contacts, list_users
from .manage_users import delete_user, set_user_blocked, update_user_role
from .permissions import ensure_admin
from .record_login import record_login
from .update_profile import update_profile

__all__ = [
    "AuthenticationStatus",
    "authenticate_user",
    "create_user",
    "delete_user",
    "ensure_admin",
    "get_user",
    "list_contacts",
    "list_users",
    "record_login",
    "register_user",
    "set_user_blocked",
    "update_profile",
    "update_user_role",
]
