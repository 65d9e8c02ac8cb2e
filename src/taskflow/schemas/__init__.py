"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .admin import AdminStats, AuditEntryRead, RecentTask
from .auth import (
    AuthResponse,
    AuthTokens,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPayload,
)
from .system import Envelope, HealthCheckResponse, RootResponse
from .task import TaskCreate, TaskListResponse, TaskOwner, TaskRead, TaskUpdate
from .upload import UploadResult
from .user import AdminUserRead, RoleUpdate, UserPublic

__all__ = [
    "AdminStats",
    "AdminUserRead",
    "AuditEntryRead",
    "AuthResponse",
    "AuthTokens",
    "Envelope",
    "HealthCheckResponse",
    "LoginRequest",
    "RecentTask",
    "RefreshRequest",
    "RegisterRequest",
    "RoleUpdate",
    "RootResponse",
    "TaskCreate",
    "TaskListResponse",
    "TaskOwner",
    "TaskRead",
    "TaskUpdate",
    "TokenPayload",
    "UploadResult",
    "UserPublic",
]
