"""Ownership-or-admin authorization policy.

Every task and admin operation consults this module after the caller's
identity has been resolved. The decision depends only on the actor, the
action, and the owner of the resource being touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..errors import PermissionDeniedError
from ..models import UserRole


@dataclass(frozen=True, slots=True)
class Actor:
    """Authenticated identity making the current request."""

    id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


class PolicyAction(str, Enum):
    """Operations governed by the policy."""

    LIST_TASKS = "list_tasks"
    READ_TASK = "read_task"
    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    MANAGE_USERS = "manage_users"


_OWNER_OR_ADMIN = frozenset({PolicyAction.READ_TASK, PolicyAction.UPDATE_TASK, PolicyAction.DELETE_TASK})
_ANY_ACTOR = frozenset({PolicyAction.LIST_TASKS, PolicyAction.CREATE_TASK})


def is_allowed(actor: Actor, action: PolicyAction, owner_id: int | None = None) -> bool:
    """Return whether ``actor`` may perform ``action`` on a resource owned by ``owner_id``."""

    if action in _ANY_ACTOR:
        return True
    if action is PolicyAction.MANAGE_USERS:
        return actor.is_admin
    if action in _OWNER_OR_ADMIN:
        return actor.is_admin or (owner_id is not None and owner_id == actor.id)
    return False


def authorize(actor: Actor, action: PolicyAction, owner_id: int | None = None) -> None:
    """Raise ``PermissionDeniedError`` unless the policy allows the action."""

    if not is_allowed(actor, action, owner_id):
        raise PermissionDeniedError(
            "You do not have permission to perform this action.",
            details={"action": action.value},
        )


def task_list_scope(actor: Actor, requested_owner_id: int | None = None) -> int | None:
    """Return the owner filter to apply when listing tasks.

    Admins see every task unless they narrow by owner. Regular users always see
    their own tasks only; a requested owner is replaced by the actor's id.
    """

    if actor.is_admin:
        return requested_owner_id
    return actor.id


def assign_owner(actor: Actor) -> int:
    """Return the owner of a newly created task."""

    return actor.id


__all__ = [
    "Actor",
    "PolicyAction",
    "assign_owner",
    "authorize",
    "is_allowed",
    "task_list_scope",
]
