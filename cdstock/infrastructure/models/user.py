"""SQLAlchemy model for the users table."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import expression

from cdstock.infrastructure.database import Base
from cdstock.utils import now_in_app_naive_datetime


class UserModel(Base):
    """Database representation of an application user."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    email = Column(String(120), nullable=False, unique=True, index=True)
    name = Column(String(80), nullable=False)
    phone = Column(String(30), nullable=True)
    profile_picture = Column(String(500), nullable=True)
    role = Column(String(10), nullable=False, default="normal", index=True)
    password = Column(String(255), nullable=False)
    is_blocked = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    deleted = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=True, onupdate=now_in_app_naive_datetime)


__all__ = ["UserModel"]
