"""User-facing Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr

from ..models import UserRole


class UserPublic(BaseModel):
    """Safe public representation of a user; never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    name: str
    image: str | None = None
    role: UserRole
    created_at: datetime


class AdminUserRead(UserPublic):
    """User row as listed on the admin dashboard."""

    task_count: int = 0


class RoleUpdate(BaseModel):
    """Payload for changing a user's role."""

    role: UserRole


__all__ = ["AdminUserRead", "RoleUpdate", "UserPublic"]
