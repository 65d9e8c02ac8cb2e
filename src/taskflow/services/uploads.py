"""File upload collaborator backed by Azure Blob Storage."""

from __future__ import annotations

import logging
import mimetypes
import posixpath
from typing import Protocol
from uuid import uuid4

from azure.core.exceptions import AzureError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient

from ..core.config import Settings
from ..errors import ServerError, ValidationError
from ..schemas.upload import UploadResult

logger = logging.getLogger(__name__)


class Uploader(Protocol):
    """Narrow interface to the third-party upload host."""

    async def upload(self, data: bytes, *, content_type: str, filename: str | None = None) -> UploadResult:
        ...

    async def close(self) -> None:
        ...


def _blob_extension(filename: str | None, content_type: str) -> str:
    if filename:
        _, ext = posixpath.splitext(filename)
        if ext:
            return ext.lower()
    return mimetypes.guess_extension(content_type) or ""


class AzureBlobUploader:
    """Store uploads as blobs under ``<container>/<folder>/``."""

    def __init__(self, client: BlobServiceClient, *, container: str, folder: str) -> None:
        self._client = client
        self._container = container
        self._folder = folder.strip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "AzureBlobUploader":
        if not settings.azure_blob_connection_string:
            raise ValueError("Azure Blob connection string is not configured.")
        client = BlobServiceClient.from_connection_string(settings.azure_blob_connection_string)
        return cls(client, container=settings.azure_blob_container, folder=settings.upload_folder)

    async def upload(self, data: bytes, *, content_type: str, filename: str | None = None) -> UploadResult:
        blob_name = f"{self._folder}/{uuid4().hex}{_blob_extension(filename, content_type)}"
        blob = self._client.get_blob_client(self._container, blob_name)
        await blob.upload_blob(
            data,
            overwrite=False,
            content_settings=ContentSettings(content_type=content_type),
        )
        logger.info("Blob uploaded", extra={"blob_name": blob_name, "size": len(data)})
        return UploadResult(url=blob.url, public_id=blob_name)

    async def close(self) -> None:
        await self._client.close()


class UploadService:
    """Validate an incoming file and hand it to the configured uploader."""

    def __init__(self, uploader: Uploader | None, settings: Settings) -> None:
        self._uploader = uploader
        self._settings = settings

    async def upload(self, data: bytes, *, content_type: str | None, filename: str | None) -> UploadResult:
        if not data:
            raise ValidationError.for_field("file", "File is empty.")
        if len(data) > self._settings.upload_max_bytes:
            raise ValidationError.for_field(
                "file",
                f"File exceeds the maximum size of {self._settings.upload_max_bytes} bytes.",
            )
        media_type = (content_type or "").split(";", 1)[0].strip().lower()
        if media_type not in self._settings.upload_allowed_content_types:
            raise ValidationError.for_field("file", f"Content type '{media_type or 'unknown'}' is not allowed.")
        if self._uploader is None:
            raise ServerError("File uploads are not configured.", code="uploads_not_configured")
        try:
            return await self._uploader.upload(data, content_type=media_type, filename=filename)
        except AzureError as exc:
            logger.exception("Upload to blob storage failed", extra={"upload_filename": filename})
            raise ServerError("Failed to upload file.", code="upload_failed") from exc


__all__ = ["AzureBlobUploader", "UploadService", "Uploader"]
