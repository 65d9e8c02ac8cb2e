"""Task domain models built with SQLModel."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

from .common import TimestampMixin, enum_column

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .user import User

TITLE_MAX_LENGTH = 200


class TaskStatus(str, Enum):
    """Free-form progress label; any status may follow any other."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class TaskPriority(str, Enum):
    """Enumeration of task priorities."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class TaskBase(SQLModel, table=False):
    """Shared attributes for task models."""

    title: str = Field(
        max_length=TITLE_MAX_LENGTH,
        sa_column=sa.Column(sa.String(length=TITLE_MAX_LENGTH), nullable=False),
    )
    description: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.Text(), nullable=True),
    )
    status: TaskStatus = Field(
        default=TaskStatus.TODO,
        sa_column=enum_column(TaskStatus, "task_status", default=TaskStatus.TODO),
    )
    priority: TaskPriority = Field(
        default=TaskPriority.MEDIUM,
        sa_column=enum_column(TaskPriority, "task_priority", default=TaskPriority.MEDIUM),
    )
    due_date: datetime | None = Field(
        default=None,
        sa_column=sa.Column(sa.DateTime(timezone=True), nullable=True),
    )
    attachment: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.String(length=2048), nullable=True),
    )
    owner_id: int = Field(
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )


class Task(TaskBase, TimestampMixin, table=True):
    """Persistent task model."""

    __tablename__ = "tasks"
    __table_args__ = (
        sa.CheckConstraint("length(title) > 0", name="ck_tasks_title_length"),
        sa.Index("ix_tasks_owner_id", "owner_id"),
        sa.Index("ix_tasks_created_at", "created_at"),
    )

    id: int | None = Field(default=None, primary_key=True)
    owner: "User" = Relationship(back_populates="tasks")


__all__ = ["TITLE_MAX_LENGTH", "Task", "TaskBase", "TaskPriority", "TaskStatus"]
