from __future__ import annotations

from typing import Any

import pytest

from taskflow.core.config import Settings
from taskflow.services.uploads import AzureBlobUploader


class _FakeBlobClient:
    def __init__(self, container: str, name: str) -> None:
        self.url = f"https://account.blob.core.windows.net/{container}/{name}"
        self.uploads: list[tuple[bytes, dict[str, Any]]] = []

    async def upload_blob(self, data: bytes, **kwargs: Any) -> None:
        self.uploads.append((data, kwargs))


class _FakeServiceClient:
    def __init__(self) -> None:
        self.blobs: list[_FakeBlobClient] = []
        self.closed = False

    def get_blob_client(self, container: str, blob: str) -> _FakeBlobClient:
        client = _FakeBlobClient(container, blob)
        self.blobs.append(client)
        return client

    async def close(self) -> None:
        self.closed = True


@pytest.mark.asyncio
async def test_blob_uploader_stores_under_folder_with_content_type() -> None:
    service = _FakeServiceClient()
    uploader = AzureBlobUploader(service, container="media", folder="/taskflow/")

    result = await uploader.upload(b"%PDF-1.7", content_type="application/pdf", filename="Outline.PDF")

    assert len(service.blobs) == 1
    blob = service.blobs[0]
    assert result.public_id.startswith("taskflow/")
    assert result.public_id.endswith(".pdf")
    assert result.url == blob.url
    data, kwargs = blob.uploads[0]
    assert data == b"%PDF-1.7"
    assert kwargs["overwrite"] is False
    assert kwargs["content_settings"].content_type == "application/pdf"

    await uploader.close()
    assert service.closed is True


@pytest.mark.asyncio
async def test_blob_uploader_guesses_extension_from_content_type() -> None:
    service = _FakeServiceClient()
    uploader = AzureBlobUploader(service, container="media", folder="taskflow")

    result = await uploader.upload(b"png", content_type="image/png", filename=None)

    assert result.public_id.endswith(".png")


def test_blob_uploader_requires_connection_string() -> None:
    with pytest.raises(ValueError):
        AzureBlobUploader.from_settings(Settings(environment="test", azure_blob_connection_string=None))
