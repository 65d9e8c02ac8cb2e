"""Column builders and mixins shared by the TaskFlow tables."""

from datetime import datetime, timezone
from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def enum_column(enum_type: type[Enum], name: str, *, default: Enum | None = None) -> sa.Column:
    """Build a required enum column stored as a constrained string.

    Values are written by name, so the same table definition works on SQLite
    and PostgreSQL without a native enum type.
    """
    return sa.Column(
        sa.Enum(enum_type, name=name, native_enum=False, validate_strings=True),
        nullable=False,
        server_default=default.value if default is not None else None,
    )


class TimestampMixin(SQLModel, table=False):
    """Creation and last-edit timestamps; ``updated_at`` moves only through :meth:`touch`."""

    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now()},
    )

    def touch(self) -> None:
        self.updated_at = utcnow()


__all__ = ["TimestampMixin", "enum_column", "utcnow"]
