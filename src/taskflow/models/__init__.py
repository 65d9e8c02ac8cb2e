"""Domain models exposed for the TaskFlow service."""

from __future__ import annotations

from .audit import AuditAction, AuditEntry
from .common import TimestampMixin, enum_column, utcnow
from .task import TITLE_MAX_LENGTH, Task, TaskBase, TaskPriority, TaskStatus
from .user import User, UserBase, UserRole

__all__ = [
    "AuditAction",
    "AuditEntry",
    "TITLE_MAX_LENGTH",
    "Task",
    "TaskBase",
    "TaskPriority",
    "TaskStatus",
    "TimestampMixin",
    "User",
    "UserBase",
    "UserRole",
    "enum_column",
    "utcnow",
]
