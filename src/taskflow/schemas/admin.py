"""Schemas served by the admin dashboard endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..models import AuditAction, TaskPriority, TaskStatus


class RecentTask(BaseModel):
    """A recently created task together with its owner's display name."""

    id: int
    title: str
    status: TaskStatus
    priority: TaskPriority
    owner_id: int
    owner_name: str
    created_at: datetime


class AdminStats(BaseModel):
    """Aggregate figures shown on the dashboard."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total_users": 3,
                "total_tasks": 12,
                "tasks_by_status": {
                    TaskStatus.TODO.value: 5,
                    TaskStatus.IN_PROGRESS.value: 4,
                    TaskStatus.COMPLETED.value: 3,
                },
                "recent_tasks": [],
            }
        }
    )

    total_users: int = Field(ge=0)
    total_tasks: int = Field(ge=0)
    tasks_by_status: dict[TaskStatus, int]
    recent_tasks: list[RecentTask]


class AuditEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    actor_id: int
    action: AuditAction
    target_type: str
    target_id: int
    details: dict[str, Any]
    created_at: datetime


__all__ = ["AdminStats", "AuditEntryRead", "RecentTask"]
