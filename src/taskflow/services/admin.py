"""Administrative workflows backing the dashboard endpoints."""

from __future__ import annotations

import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.policy import Actor, PolicyAction, authorize
from ..errors import NotFoundError, SelfDeletionError
from ..models import AuditAction, AuditEntry, User, UserRole
from ..repositories import TaskRepository, UserRepository
from ..schemas.admin import AdminStats, RecentTask
from .audit import AuditService

logger = logging.getLogger(__name__)

RECENT_TASKS_LIMIT = 5


class AdminService:
    """User management and reporting restricted to administrators.

    The actor is checked on construction so no method can be reached by a
    regular user.
    """

    def __init__(self, session: AsyncSession, actor: Actor) -> None:
        authorize(actor, PolicyAction.MANAGE_USERS)
        self._session = session
        self._actor = actor
        self._users = UserRepository(session)
        self._tasks = TaskRepository(session)
        self._audit = AuditService(session)

    async def stats(self) -> AdminStats:
        recent = await self._tasks.list_recent_with_owner(RECENT_TASKS_LIMIT)
        return AdminStats(
            total_users=await self._users.count(),
            total_tasks=await self._tasks.count(),
            tasks_by_status=await self._tasks.count_by_status(),
            recent_tasks=[
                RecentTask(
                    id=task.id,
                    title=task.title,
                    status=task.status,
                    priority=task.priority,
                    owner_id=owner.id,
                    owner_name=owner.name or owner.email,
                    created_at=task.created_at,
                )
                for task, owner in recent
            ],
        )

    async def list_users(self) -> list[tuple[User, int]]:
        return await self._users.list_with_task_counts()

    async def change_role(self, user_id: int, role: UserRole) -> User:
        """Set ``role`` on the target user; the actor may target themselves."""
        user = await self._get_user(user_id)
        previous = user.role
        user.role = role
        user.touch()
        self._session.add(user)
        await self._audit.record(
            actor_id=self._actor.id,
            action=AuditAction.USER_ROLE_CHANGED,
            target_type="user",
            target_id=user_id,
            details={"previous_role": previous.value, "role": role.value},
        )
        await self._session.commit()
        await self._users.refresh(user)
        logger.info(
            "User role changed",
            extra={"actor_id": self._actor.id, "user_id": user_id, "role": role.value},
        )
        return user

    async def delete_user(self, user_id: int) -> None:
        """Delete a user and every task they own."""
        if user_id == self._actor.id:
            raise SelfDeletionError()
        user = await self._get_user(user_id)
        deleted_tasks = await self._tasks.count_for_owner(user_id)
        await self._audit.record(
            actor_id=self._actor.id,
            action=AuditAction.USER_DELETED,
            target_type="user",
            target_id=user_id,
            details={"email": user.email, "deleted_tasks": deleted_tasks},
        )
        await self._users.delete(user)
        await self._session.commit()
        logger.info(
            "User deleted",
            extra={"actor_id": self._actor.id, "user_id": user_id, "deleted_tasks": deleted_tasks},
        )

    async def audit_log(self, limit: int = 50) -> list[AuditEntry]:
        return await self._audit.list_recent(limit)

    async def _get_user(self, user_id: int) -> User:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found.", code="user_not_found")
        return user


__all__ = ["AdminService", "RECENT_TASKS_LIMIT"]
