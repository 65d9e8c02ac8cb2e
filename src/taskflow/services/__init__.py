"""Domain service layer package."""

from __future__ import annotations

from .admin import AdminService
from .audit import AuditService
from .auth import AuthService, resolve_identity
from .tasks import TaskService
from .uploads import AzureBlobUploader, Uploader, UploadService
from .users import UserService

__all__ = [
    "AdminService",
    "AuditService",
    "AuthService",
    "AzureBlobUploader",
    "TaskService",
    "UploadService",
    "Uploader",
    "UserService",
    "resolve_identity",
]
