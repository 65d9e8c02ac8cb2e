from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from taskflow.core.config import Settings
from taskflow.db import Database
from taskflow.main import create_app
from taskflow.models import UserRole
from taskflow.services import AuthService, UserService

DEFAULT_PASSWORD = "Valid123"


@dataclass(slots=True)
class AuthenticatedUser:
    id: int
    email: str
    name: str
    role: UserRole
    access_token: str
    refresh_token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


UserFactory = Callable[..., Awaitable[AuthenticatedUser]]


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        environment="test",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-access-secret",
        jwt_refresh_secret_key="test-refresh-secret",
        access_token_expire_minutes=5,
        refresh_token_expire_minutes=60,
        azure_blob_connection_string=None,
    )


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncIterator[Database]:
    database = Database(settings.database_url)
    await database.create_all()
    try:
        yield database
    finally:
        await database.dispose()


@pytest_asyncio.fixture
async def app(settings: Settings, database: Database) -> AsyncIterator[FastAPI]:
    application = create_app(settings=settings, database=database)
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture
async def user_factory(database: Database, settings: Settings) -> UserFactory:
    """Create users directly in storage and issue them a token pair."""

    counter = 0

    async def _create(
        *,
        name: str | None = None,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        role: UserRole = UserRole.USER,
    ) -> AuthenticatedUser:
        nonlocal counter
        counter += 1
        name = name or f"User {counter}"
        email = email or f"user{counter}@example.com"
        async with database.session() as session:
            user = await UserService(session).create_user(
                email=email,
                password=password,
                name=name,
                role=role,
            )
            tokens = AuthService(session, settings).build_token_pair(user)
        assert user.id is not None
        return AuthenticatedUser(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            access_token=tokens.access.token,
            refresh_token=tokens.refresh.token,
        )

    return _create
