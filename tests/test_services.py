from __future__ import annotations

import pytest
from sqlmodel import select

from taskflow.core.config import Settings
from taskflow.core.policy import Actor
from taskflow.db import Database
from taskflow.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    SelfDeletionError,
    ValidationError,
)
from taskflow.models import AuditAction, AuditEntry, Task, TaskPriority, TaskStatus, User, UserRole
from taskflow.schemas import TaskCreate, TaskUpdate
from taskflow.services import AdminService, AuthService, TaskService, UserService

pytestmark = pytest.mark.asyncio


async def _make_user(database: Database, email: str, role: UserRole = UserRole.USER) -> User:
    async with database.session() as session:
        return await UserService(session).create_user(
            email=email,
            password="Valid123",
            name=email.split("@")[0].title(),
            role=role,
        )


def _actor(user: User) -> Actor:
    assert user.id is not None
    return Actor(id=user.id, role=user.role)


async def test_register_hashes_password_and_rejects_duplicates(database: Database, settings: Settings) -> None:
    async with database.session() as session:
        service = AuthService(session, settings)
        user = await service.register_user(name="Alice", email="alice@example.com", password="Valid123")

        assert user.id is not None
        assert user.role is UserRole.USER
        assert user.hashed_password != "Valid123"

        with pytest.raises(ConflictError):
            await service.register_user(name="Alice Again", email="alice@example.com", password="Valid123")


async def test_register_rejects_weak_password_before_touching_storage(
    database: Database,
    settings: Settings,
) -> None:
    async with database.session() as session:
        with pytest.raises(ValidationError) as excinfo:
            await AuthService(session, settings).register_user(
                name="Weak",
                email="weak@example.com",
                password="short1",
            )
        assert excinfo.value.details == {
            "errors": [
                {"field": "password", "message": "Password must be at least 8 characters."},
                {"field": "password", "message": "Password must contain at least one uppercase letter."},
            ]
        }
        assert await UserService(session).get_user_by_email("weak@example.com") is None


async def test_authenticate_user_uses_generic_failure(database: Database, settings: Settings) -> None:
    await _make_user(database, "bob@example.com")

    async with database.session() as session:
        service = AuthService(session, settings)
        user = await service.authenticate_user("bob@example.com", "Valid123")
        assert user.email == "bob@example.com"

        for email, password in (("bob@example.com", "Nope1234"), ("ghost@example.com", "Valid123")):
            with pytest.raises(AuthenticationError, match="Invalid email or password."):
                await service.authenticate_user(email, password)


async def test_task_service_enforces_policy(database: Database) -> None:
    alice = await _make_user(database, "alice@example.com")
    bob = await _make_user(database, "bob@example.com")
    carol = await _make_user(database, "carol@example.com", UserRole.ADMIN)

    async with database.session() as session:
        task = await TaskService(session, _actor(alice)).create_task(
            TaskCreate(title="A", priority=TaskPriority.HIGH)
        )
        assert task.owner_id == alice.id
        assert task.owner.email == "alice@example.com"
        assert task.status is TaskStatus.TODO

    async with database.session() as session:
        bob_service = TaskService(session, _actor(bob))
        with pytest.raises(PermissionDeniedError):
            await bob_service.get_task(task.id)
        with pytest.raises(PermissionDeniedError):
            await bob_service.update_task(task.id, TaskUpdate(title="Hijacked"))
        with pytest.raises(PermissionDeniedError):
            await bob_service.delete_task(task.id)
        with pytest.raises(NotFoundError):
            await bob_service.get_task(task.id + 100)

        items, total = await bob_service.list_tasks(owner_id=alice.id)
        assert items == []
        assert total == 0

    async with database.session() as session:
        carol_service = TaskService(session, _actor(carol))
        updated = await carol_service.update_task(task.id, TaskUpdate(status=TaskStatus.IN_PROGRESS))
        assert updated.status is TaskStatus.IN_PROGRESS
        assert updated.title == "A"
        assert updated.owner.id == alice.id
        await carol_service.delete_task(task.id)

    async with database.session() as session:
        assert await session.get(Task, task.id) is None
        result = await session.execute(select(AuditEntry).order_by(AuditEntry.id))
        entries = list(result.scalars().all())
        assert [entry.action for entry in entries] == [
            AuditAction.TASK_UPDATED_BY_ADMIN,
            AuditAction.TASK_DELETED_BY_ADMIN,
        ]
        assert entries[0].details == {"owner_id": alice.id, "fields": ["status"]}


async def test_admin_acting_on_own_task_is_not_audited(database: Database) -> None:
    carol = await _make_user(database, "carol@example.com", UserRole.ADMIN)

    async with database.session() as session:
        service = TaskService(session, _actor(carol))
        task = await service.create_task(TaskCreate(title="Mine"))
        await service.update_task(task.id, TaskUpdate(title="Still mine"))
        await service.delete_task(task.id)

    async with database.session() as session:
        result = await session.execute(select(AuditEntry))
        assert result.scalars().all() == []


async def test_admin_service_requires_admin(database: Database) -> None:
    alice = await _make_user(database, "alice@example.com")

    async with database.session() as session:
        with pytest.raises(PermissionDeniedError):
            AdminService(session, _actor(alice))


async def test_admin_delete_user_cascades_and_audits(database: Database) -> None:
    alice = await _make_user(database, "alice@example.com")
    carol = await _make_user(database, "carol@example.com", UserRole.ADMIN)

    async with database.session() as session:
        alice_tasks = TaskService(session, _actor(alice))
        await alice_tasks.create_task(TaskCreate(title="One"))
        await alice_tasks.create_task(TaskCreate(title="Two"))

    async with database.session() as session:
        admin = AdminService(session, _actor(carol))
        with pytest.raises(SelfDeletionError):
            await admin.delete_user(carol.id)
        await admin.delete_user(alice.id)

    async with database.session() as session:
        assert await session.get(User, alice.id) is None
        remaining = await session.execute(select(Task).where(Task.owner_id == alice.id))
        assert remaining.scalars().all() == []

        admin = AdminService(session, _actor(carol))
        entries = await admin.audit_log()
        assert entries[0].action is AuditAction.USER_DELETED
        assert entries[0].details == {"email": "alice@example.com", "deleted_tasks": 2}

        stats = await admin.stats()
        assert stats.total_users == 1
        assert stats.total_tasks == 0
        assert stats.tasks_by_status == {status: 0 for status in TaskStatus}


async def test_admin_change_role_persists(database: Database) -> None:
    alice = await _make_user(database, "alice@example.com")
    carol = await _make_user(database, "carol@example.com", UserRole.ADMIN)

    async with database.session() as session:
        user = await AdminService(session, _actor(carol)).change_role(alice.id, UserRole.ADMIN)
        assert user.role is UserRole.ADMIN

    async with database.session() as session:
        rows = await AdminService(session, _actor(carol)).list_users()
        roles = {user.email: user.role for user, _ in rows}
        assert roles["alice@example.com"] is UserRole.ADMIN


async def test_update_moves_updated_at_but_not_created_at(database: Database) -> None:
    alice = await _make_user(database, "alice@example.com")

    async with database.session() as session:
        service = TaskService(session, _actor(alice))
        task = await service.create_task(TaskCreate(title="Timestamps"))
        created_at, updated_at = task.created_at, task.updated_at

        updated = await service.update_task(task.id, TaskUpdate(description="Edited"))

    assert updated.created_at == created_at
    assert updated.updated_at > updated_at
