"""Database repositories for encapsulating persistence logic."""

from __future__ import annotations

from .audit import AuditRepository
from .base import BaseRepository
from .tasks import TaskRepository
from .users import UserRepository

__all__ = ["AuditRepository", "BaseRepository", "TaskRepository", "UserRepository"]
