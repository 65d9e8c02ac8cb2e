"""Audit trail entries recorded for administrative actions."""

from datetime import datetime
from enum import Enum
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import enum_column, utcnow


class AuditAction(str, Enum):
    """Enumeration of audited administrative actions."""

    USER_ROLE_CHANGED = "user_role_changed"
    USER_DELETED = "user_deleted"
    TASK_UPDATED_BY_ADMIN = "task_updated_by_admin"
    TASK_DELETED_BY_ADMIN = "task_deleted_by_admin"


class AuditEntry(SQLModel, table=True):
    """Persistent record of an administrative action.

    ``actor_id`` and ``target_id`` are plain integers rather than foreign keys
    so that entries outlive the users and tasks they describe.
    """

    __tablename__ = "audit_entries"
    __table_args__ = (sa.Index("ix_audit_entries_created_at", "created_at"),)

    id: int | None = Field(default=None, primary_key=True)
    actor_id: int = Field(sa_column=sa.Column(sa.Integer(), nullable=False))
    action: AuditAction = Field(sa_column=enum_column(AuditAction, "audit_action"))
    target_type: str = Field(
        max_length=32,
        sa_column=sa.Column(sa.String(length=32), nullable=False),
    )
    target_id: int = Field(sa_column=sa.Column(sa.Integer(), nullable=False))
    details: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=sa.Column(sa.JSON(), nullable=False),
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=sa.Column(sa.DateTime(timezone=True), nullable=False),
    )


__all__ = ["AuditAction", "AuditEntry"]
