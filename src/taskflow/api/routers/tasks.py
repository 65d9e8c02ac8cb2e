"""Routes handling task CRUD operations."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from ...deps import CurrentActorDependency, DatabaseSessionDependency
from ...models import Task, TaskPriority, TaskStatus
from ...schemas import Envelope, TaskCreate, TaskListResponse, TaskRead, TaskUpdate
from ...services import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])

LimitQuery = Annotated[
    int,
    Query(
        ge=1,
        le=100,
        description="Maximum number of tasks to return in a single response.",
    ),
]
OffsetQuery = Annotated[
    int,
    Query(
        ge=0,
        description="Number of tasks to skip before collecting results.",
    ),
]
StatusQuery = Annotated[
    TaskStatus | None,
    Query(alias="status", description="Filter results to tasks matching the supplied status."),
]
PriorityQuery = Annotated[
    TaskPriority | None,
    Query(description="Filter results to tasks matching the supplied priority."),
]
OwnerQuery = Annotated[
    int | None,
    Query(
        ge=1,
        description="Restrict results to tasks owned by the provided user id (administrators only).",
    ),
]
TaskIdPath = Annotated[int, Path(ge=1, description="Task identifier.")]


def _map_task(task: Task) -> TaskRead:
    return TaskRead.model_validate(task)


@router.get("", response_model=Envelope[TaskListResponse], summary="List visible tasks")
async def list_tasks(
    actor: CurrentActorDependency,
    session: DatabaseSessionDependency,
    limit: LimitQuery = 20,
    offset: OffsetQuery = 0,
    status_filter: StatusQuery = None,
    priority: PriorityQuery = None,
    owner_id: OwnerQuery = None,
) -> Envelope[TaskListResponse]:
    tasks, total = await TaskService(session, actor).list_tasks(
        owner_id=owner_id,
        status=status_filter,
        priority=priority,
        limit=limit,
        offset=offset,
    )
    return Envelope[TaskListResponse](
        success=True,
        data=TaskListResponse(
            items=[_map_task(task) for task in tasks],
            total=total,
            limit=limit,
            offset=offset,
        ),
    )


@router.post(
    "",
    response_model=Envelope[TaskRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create a task owned by the caller",
)
async def create_task(
    payload: TaskCreate,
    actor: CurrentActorDependency,
    session: DatabaseSessionDependency,
) -> Envelope[TaskRead]:
    task = await TaskService(session, actor).create_task(payload)
    return Envelope[TaskRead](success=True, data=_map_task(task), message="Task created successfully")


@router.get("/{task_id}", response_model=Envelope[TaskRead], summary="Read a task")
async def read_task(
    task_id: TaskIdPath,
    actor: CurrentActorDependency,
    session: DatabaseSessionDependency,
) -> Envelope[TaskRead]:
    task = await TaskService(session, actor).get_task(task_id)
    return Envelope[TaskRead](success=True, data=_map_task(task))


@router.api_route(
    "/{task_id}",
    methods=["PUT", "PATCH"],
    response_model=Envelope[TaskRead],
    summary="Partially update a task",
)
async def update_task(
    task_id: TaskIdPath,
    payload: TaskUpdate,
    actor: CurrentActorDependency,
    session: DatabaseSessionDependency,
) -> Envelope[TaskRead]:
    task = await TaskService(session, actor).update_task(task_id, payload)
    return Envelope[TaskRead](success=True, data=_map_task(task), message="Task updated successfully")


@router.delete("/{task_id}", response_model=Envelope[None], summary="Delete a task")
async def delete_task(
    task_id: TaskIdPath,
    actor: CurrentActorDependency,
    session: DatabaseSessionDependency,
) -> Envelope[None]:
    await TaskService(session, actor).delete_task(task_id)
    return Envelope[None](success=True, message="Task deleted successfully")
