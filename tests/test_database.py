from __future__ import annotations

import pytest
from sqlmodel import select

from taskflow.db import Database
from taskflow.models import User, UserRole
from taskflow.services import UserService

pytestmark = pytest.mark.asyncio


async def test_instances_stay_readable_after_session_closes(database: Database) -> None:
    async with database.session() as session:
        user = await UserService(session).create_user(
            email="reader@example.com",
            password="Valid123",
            name="Reader",
            role=UserRole.ADMIN,
        )

    assert user.id is not None
    assert user.email == "reader@example.com"
    assert user.role is UserRole.ADMIN
    assert user.created_at is not None


async def test_uncommitted_work_is_discarded_on_exit(database: Database) -> None:
    async with database.session() as session:
        session.add(User(email="pending@example.com", name="Pending", hashed_password="x"))
        await session.flush()

    async with database.session() as session:
        result = await session.execute(select(User).where(User.email == "pending@example.com"))
        assert result.scalars().first() is None
