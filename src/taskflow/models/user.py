"""User domain models built with SQLModel."""

from enum import Enum
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

from .common import TimestampMixin, enum_column

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .task import Task


class UserRole(str, Enum):
    """Roles supported by the authorization policy."""

    USER = "USER"
    ADMIN = "ADMIN"


class UserBase(SQLModel, table=False):
    """Shared attributes for user models."""

    email: str = Field(
        max_length=320,
        sa_column=sa.Column(
            sa.String(length=320),
            nullable=False,
            unique=True,
        ),
    )
    name: str = Field(
        max_length=255,
        sa_column=sa.Column(sa.String(length=255), nullable=False),
    )
    image: str | None = Field(
        default=None,
        max_length=2048,
        sa_column=sa.Column(sa.String(length=2048), nullable=True),
    )
    role: UserRole = Field(
        default=UserRole.USER,
        sa_column=enum_column(UserRole, "user_role", default=UserRole.USER),
    )


class User(UserBase, TimestampMixin, table=True):
    """Persistent user model."""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    hashed_password: str = Field(
        max_length=255,
        sa_column=sa.Column(sa.String(length=255), nullable=False),
    )
    tasks: list["Task"] = Relationship(
        back_populates="owner",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


__all__ = ["User", "UserBase", "UserRole"]
