"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from ..models import TITLE_MAX_LENGTH, TaskPriority, TaskStatus, UserRole

ATTACHMENT_MAX_LENGTH = 2048

TASK_READ_EXAMPLE = {
    "id": 1,
    "title": "Draft product documentation",
    "description": "Outline sections for the public API guide.",
    "status": TaskStatus.TODO.value,
    "priority": TaskPriority.HIGH.value,
    "due_date": "2024-03-01T17:00:00Z",
    "attachment": "https://example.blob.core.windows.net/taskflow/taskflow/outline.pdf",
    "owner_id": 42,
    "owner": {"id": 42, "name": "Alice", "email": "alice@example.com", "role": UserRole.USER.value},
    "created_at": "2024-01-01T12:00:00Z",
    "updated_at": "2024-01-02T08:30:00Z",
}

_NON_NULLABLE_UPDATE_FIELDS = ("title", "status", "priority")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


_HTTP_URL_ADAPTER = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    """Validate ``value`` as an http(s) URL but keep the caller's spelling."""
    try:
        _HTTP_URL_ADAPTER.validate_python(value)
    except PydanticValidationError as exc:
        raise ValueError(exc.errors()[0]["msg"]) from exc
    return value


AttachmentUrl = Annotated[
    str,
    StringConstraints(max_length=ATTACHMENT_MAX_LENGTH),
    AfterValidator(_check_http_url),
]


class TaskCreate(BaseModel):
    """Payload for creating a new task.

    Ownership is never taken from the payload; unknown keys such as
    ``owner_id`` or ``user_id`` are dropped.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Draft product documentation",
                "description": "Outline sections for the public API guide.",
                "priority": TaskPriority.HIGH.value,
                "due_date": "2024-03-01T17:00:00Z",
            }
        },
    )

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None)
    status: TaskStatus = Field(default=TaskStatus.TODO)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    due_date: datetime | None = Field(default=None)
    attachment: AttachmentUrl | None = Field(default=None)

    _normalise_optional = field_validator("due_date", "attachment", mode="before")(_blank_to_none)


class TaskUpdate(BaseModel):
    """Payload for partially updating an existing task.

    Only the supplied fields are applied. ``description``, ``due_date`` and
    ``attachment`` may be cleared with ``null``; the remaining fields may not.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Update API documentation",
                "status": TaskStatus.IN_PROGRESS.value,
            }
        },
    )

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None)
    status: TaskStatus | None = Field(default=None)
    priority: TaskPriority | None = Field(default=None)
    due_date: datetime | None = Field(default=None)
    attachment: AttachmentUrl | None = Field(default=None)

    _normalise_optional = field_validator("due_date", "attachment", mode="before")(_blank_to_none)

    @field_validator(*_NON_NULLABLE_UPDATE_FIELDS, mode="after")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field cannot be null.")
        return value

    @model_validator(mode="after")
    def _ensure_payload_not_empty(self) -> "TaskUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        return self

    def changes(self) -> dict[str, Any]:
        """Return the supplied fields ready to be applied to a ``Task`` row."""
        return self.model_dump(exclude_unset=True)


class TaskOwner(BaseModel):
    """Owner summary embedded in every task representation."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: UserRole


class TaskRead(BaseModel):
    """Public representation of a task, including who owns it."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": TASK_READ_EXAMPLE},
    )

    id: int
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = None
    attachment: str | None = None
    owner_id: int
    owner: TaskOwner
    created_at: datetime
    updated_at: datetime


class TaskListResponse(BaseModel):
    """Paginated collection of tasks."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [TASK_READ_EXAMPLE],
                "total": 1,
                "limit": 20,
                "offset": 0,
            }
        }
    )

    items: list[TaskRead]
    total: int
    limit: int
    offset: int


__all__ = ["TaskCreate", "TaskListResponse", "TaskOwner", "TaskRead", "TaskUpdate"]
