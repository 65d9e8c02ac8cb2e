"""Repository for interacting with user persistence models."""

from __future__ import annotations

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Task, User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Concrete repository for CRUD operations on ``User`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        """Return a user matching the supplied email if it exists."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_with_task_counts(self) -> list[tuple[User, int]]:
        """Return every user, newest first, paired with the number of tasks they own."""
        task_count = func.count(Task.id).label("task_count")
        query = (
            select(User, task_count)
            .outerjoin(Task, Task.owner_id == User.id)
            .group_by(User.id)
            .order_by(User.created_at.desc(), User.id.desc())
        )
        result = await self.session.execute(query)
        return [(user, int(count)) for user, count in result.all()]


__all__ = ["UserRepository"]
