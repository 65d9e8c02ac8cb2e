"""Repository for interacting with task persistence models."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Task, TaskPriority, TaskStatus, User
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Concrete repository encapsulating ``Task`` persistence operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Task)

    async def get(self, entity_id: int) -> Task | None:
        """Load a task together with its owner, overwriting any stale identity-map state."""
        query = (
            select(Task)
            .where(Task.id == entity_id)
            .options(selectinload(Task.owner))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalars().first()

    async def list_paginated(
        self,
        *,
        owner_id: int | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Task], int]:
        """Return tasks (owners loaded) matching the filters along with the total count."""
        query = select(Task).options(selectinload(Task.owner))
        count_query = select(func.count()).select_from(Task)
        if owner_id is not None:
            query = query.where(Task.owner_id == owner_id)
            count_query = count_query.where(Task.owner_id == owner_id)
        if status is not None:
            query = query.where(Task.status == status)
            count_query = count_query.where(Task.status == status)
        if priority is not None:
            query = query.where(Task.priority == priority)
            count_query = count_query.where(Task.priority == priority)
        query = query.order_by(Task.created_at.desc(), Task.id.desc()).limit(limit).offset(offset)
        result = await self.session.execute(query)
        tasks = list(result.scalars().all())
        total_result = await self.session.execute(count_query)
        total = int(total_result.scalar_one())
        return tasks, total

    async def count_for_owner(self, owner_id: int) -> int:
        """Return the number of tasks assigned to ``owner_id``."""
        result = await self.session.execute(
            select(func.count()).select_from(Task).where(Task.owner_id == owner_id)
        )
        return int(result.scalar_one())

    async def count_by_status(self) -> dict[TaskStatus, int]:
        """Return task counts for every status, including statuses with no tasks."""
        result = await self.session.execute(select(Task.status, func.count()).group_by(Task.status))
        counts = {status: 0 for status in TaskStatus}
        for status, count in result.all():
            counts[TaskStatus(status)] = int(count)
        return counts

    async def list_recent_with_owner(self, limit: int = 5) -> list[tuple[Task, User]]:
        """Return the most recently created tasks joined with their owners."""
        query = (
            select(Task, User)
            .join(User, User.id == Task.owner_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [(task, owner) for task, owner in result.all()]


__all__ = ["TaskRepository"]
