"""Reusable FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from .core.config import Settings
from .core.context import bind_actor_id
from .core.policy import Actor
from .db import Database
from .services.auth import resolve_identity
from .services.uploads import Uploader


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""

    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


SettingsDependency = Annotated[Settings, Depends(get_app_settings)]
DatabaseDependency = Annotated[Database, Depends(get_database)]


async def get_db_session(database: DatabaseDependency) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields a request-scoped database session."""

    async with database.session() as session:
        yield session


DatabaseSessionDependency = Annotated[AsyncSession, Depends(get_db_session)]

_bearer_scheme = HTTPBearer(auto_error=False, description="Access token issued by /auth/login.")


async def get_current_actor(
    request: Request,
    settings: SettingsDependency,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
) -> Actor:
    """Resolve the acting identity from the ``Authorization: Bearer`` header."""

    token = credentials.credentials if credentials is not None else None
    actor = resolve_identity(token, settings)
    request.state.actor_id = actor.id
    bind_actor_id(actor.id)
    return actor


CurrentActorDependency = Annotated[Actor, Depends(get_current_actor)]


def get_uploader(request: Request) -> Uploader | None:
    """Return the configured upload collaborator, if any."""

    return getattr(request.app.state, "uploader", None)


UploaderDependency = Annotated[Uploader | None, Depends(get_uploader)]


__all__ = [
    "CurrentActorDependency",
    "DatabaseDependency",
    "DatabaseSessionDependency",
    "SettingsDependency",
    "UploaderDependency",
    "get_app_settings",
    "get_current_actor",
    "get_database",
    "get_db_session",
    "get_uploader",
]
