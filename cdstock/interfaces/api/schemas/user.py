"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cdstock.domain.entities import UserRole


class UserRead(BaseModel):
    id: str
    email: str
    name: str
    phone: str | None = None
    profile_picture: str | None = None
    role: UserRole
    is_blocked: bool
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserSummaryRead(BaseModel):
    id: str
    name: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=80)
    phone: str | None = Field(default=None, max_length=30)
    profile_picture: str | None = Field(default=None, max_length=500)

    model_config = ConfigDict(extra="forbid")


class RoleUpdate(BaseModel):
    role: UserRole


class BlockUpdate(BaseModel):
    is_blocked: bool
