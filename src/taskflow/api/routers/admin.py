"""Administrative dashboard routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path, Query

from ...deps import CurrentActorDependency, DatabaseSessionDependency
from ...schemas import AdminStats, AdminUserRead, AuditEntryRead, Envelope, RoleUpdate, UserPublic
from ...services import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])

UserIdPath = Annotated[int, Path(ge=1, description="User identifier.")]
AuditLimitQuery = Annotated[
    int,
    Query(ge=1, le=200, description="Maximum number of audit entries to return."),
]


@router.get("/stats", response_model=Envelope[AdminStats], summary="Dashboard statistics")
async def read_stats(
    actor: CurrentActorDependency,
    session: DatabaseSessionDependency,
) -> Envelope[AdminStats]:
    stats = await AdminService(session, actor).stats()
    return Envelope[AdminStats](success=True, data=stats)


@router.get("/users", response_model=Envelope[list[AdminUserRead]], summary="List users with task counts")
async def list_users(
    actor: CurrentActorDependency,
    session: DatabaseSessionDependency,
) -> Envelope[list[AdminUserRead]]:
    rows = await AdminService(session, actor).list_users()
    users = [
        AdminUserRead.model_validate(UserPublic.model_validate(user).model_dump() | {"task_count": count})
        for user, count in rows
    ]
    return Envelope[list[AdminUserRead]](success=True, data=users)


@router.patch("/users/{user_id}/role", response_model=Envelope[UserPublic], summary="Change a user's role")
async def change_user_role(
    user_id: UserIdPath,
    payload: RoleUpdate,
    actor: CurrentActorDependency,
    session: DatabaseSessionDependency,
) -> Envelope[UserPublic]:
    user = await AdminService(session, actor).change_role(user_id, payload.role)
    return Envelope[UserPublic](
        success=True,
        data=UserPublic.model_validate(user),
        message=f"User role updated to {payload.role.value}",
    )


@router.delete("/users/{user_id}", response_model=Envelope[None], summary="Delete a user and their tasks")
async def delete_user(
    user_id: UserIdPath,
    actor: CurrentActorDependency,
    session: DatabaseSessionDependency,
) -> Envelope[None]:
    await AdminService(session, actor).delete_user(user_id)
    return Envelope[None](success=True, message="User deleted successfully")


@router.get("/audit", response_model=Envelope[list[AuditEntryRead]], summary="Recent administrative actions")
async def read_audit_log(
    actor: CurrentActorDependency,
    session: DatabaseSessionDependency,
    limit: AuditLimitQuery = 50,
) -> Envelope[list[AuditEntryRead]]:
    entries = await AdminService(session, actor).audit_log(limit)
    return Envelope[list[AuditEntryRead]](
        success=True,
        data=[AuditEntryRead.model_validate(entry) for entry in entries],
    )
