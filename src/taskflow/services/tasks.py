"""Service layer encapsulating task-related operations."""

from __future__ import annotations

import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.policy import Actor, PolicyAction, assign_owner, authorize, task_list_scope
from ..errors import AuthenticationError, NotFoundError, ServerError
from ..models import AuditAction, Task, TaskPriority, TaskStatus
from ..repositories import TaskRepository, UserRepository
from ..schemas.task import TaskCreate, TaskUpdate
from .audit import AuditService

logger = logging.getLogger(__name__)


class TaskService:
    """High-level business orchestration for ``Task`` entities on behalf of an actor.

    Every operation resolves the target first (so a missing task is reported as
    not found regardless of ownership) and then asks the policy whether the
    actor may proceed.
    """

    def __init__(self, session: AsyncSession, actor: Actor) -> None:
        self._session = session
        self._actor = actor
        self._repository = TaskRepository(session)
        self._user_repository = UserRepository(session)
        self._audit = AuditService(session)

    @property
    def repository(self) -> TaskRepository:
        """Expose the underlying repository for advanced scenarios."""
        return self._repository

    async def list_tasks(
        self,
        *,
        owner_id: int | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Task], int]:
        """Return tasks visible to the actor, newest first, with the filtered total."""
        authorize(self._actor, PolicyAction.LIST_TASKS)
        return await self._repository.list_paginated(
            owner_id=task_list_scope(self._actor, owner_id),
            status=status,
            priority=priority,
            limit=limit,
            offset=offset,
        )

    async def get_task(self, task_id: int) -> Task:
        task = await self._get_existing(task_id)
        authorize(self._actor, PolicyAction.READ_TASK, task.owner_id)
        return task

    async def create_task(self, payload: TaskCreate) -> Task:
        """Create a task owned by the actor; payload ownership fields are never consulted."""
        authorize(self._actor, PolicyAction.CREATE_TASK)
        owner_id = assign_owner(self._actor)
        if await self._user_repository.get(owner_id) is None:
            raise AuthenticationError("User no longer exists.")
        task = Task(
            title=payload.title,
            description=payload.description,
            status=payload.status,
            priority=payload.priority,
            due_date=payload.due_date,
            attachment=payload.attachment,
            owner_id=owner_id,
        )
        await self._repository.add(task)
        await self._session.commit()
        logger.info("Task created", extra={"task_id": task.id, "owner_id": owner_id})
        return await self._reload(task)

    async def update_task(self, task_id: int, payload: TaskUpdate) -> Task:
        """Apply the supplied fields to a task the actor may modify."""
        task = await self._get_existing(task_id)
        authorize(self._actor, PolicyAction.UPDATE_TASK, task.owner_id)
        changes = payload.changes()
        for field_name, value in changes.items():
            setattr(task, field_name, value)
        task.touch()
        self._session.add(task)
        if self._acting_on_behalf_of(task):
            await self._audit.record(
                actor_id=self._actor.id,
                action=AuditAction.TASK_UPDATED_BY_ADMIN,
                target_type="task",
                target_id=task_id,
                details={"owner_id": task.owner_id, "fields": sorted(changes)},
            )
        await self._session.commit()
        return await self._reload(task)

    async def delete_task(self, task_id: int) -> None:
        task = await self._get_existing(task_id)
        authorize(self._actor, PolicyAction.DELETE_TASK, task.owner_id)
        if self._acting_on_behalf_of(task):
            await self._audit.record(
                actor_id=self._actor.id,
                action=AuditAction.TASK_DELETED_BY_ADMIN,
                target_type="task",
                target_id=task_id,
                details={"owner_id": task.owner_id, "title": task.title},
            )
        await self._repository.delete(task)
        await self._session.commit()
        logger.info("Task deleted", extra={"task_id": task_id, "actor_id": self._actor.id})

    async def _get_existing(self, task_id: int) -> Task:
        task = await self._repository.get(task_id)
        if task is None:
            raise NotFoundError("Task not found.", code="task_not_found")
        return task

    async def _reload(self, task: Task) -> Task:
        if task.id is None:  # pragma: no cover - defensive guard
            raise ServerError("Task must be persisted before it is reloaded.")
        return await self._get_existing(task.id)

    def _acting_on_behalf_of(self, task: Task) -> bool:
        return self._actor.is_admin and task.owner_id != self._actor.id


__all__ = ["TaskService"]
