from __future__ import annotations

import pytest
from azure.core.exceptions import ServiceRequestError
from fastapi import FastAPI, status
from httpx import AsyncClient

from taskflow.deps import get_uploader
from taskflow.schemas import UploadResult

from .conftest import UserFactory

pytestmark = pytest.mark.asyncio


class FakeUploader:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[tuple[bytes, str, str | None]] = []
        self._error = error

    async def upload(self, data: bytes, *, content_type: str, filename: str | None = None) -> UploadResult:
        if self._error is not None:
            raise self._error
        self.calls.append((data, content_type, filename))
        return UploadResult(
            url=f"https://files.example.com/taskflow/{len(self.calls)}.png",
            public_id=f"taskflow/{len(self.calls)}.png",
        )

    async def close(self) -> None:
        return None


def _install(app: FastAPI, uploader: FakeUploader | None) -> None:
    app.dependency_overrides[get_uploader] = lambda: uploader


async def test_upload_returns_stored_url(app: FastAPI, client: AsyncClient, user_factory: UserFactory) -> None:
    uploader = FakeUploader()
    _install(app, uploader)
    user = await user_factory()

    response = await client.post(
        "/api/upload",
        files={"file": ("avatar.png", b"\x89PNG-bytes", "image/png")},
        headers=user.headers,
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data == {"url": "https://files.example.com/taskflow/1.png", "public_id": "taskflow/1.png"}
    assert uploader.calls == [(b"\x89PNG-bytes", "image/png", "avatar.png")]


async def test_upload_requires_authentication(app: FastAPI, client: AsyncClient) -> None:
    _install(app, FakeUploader())

    response = await client.post("/api/upload", files={"file": ("a.png", b"data", "image/png")})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.parametrize(
    ("content", "content_type", "message_fragment"),
    [
        (b"", "image/png", "empty"),
        (b"#!/bin/sh", "application/x-sh", "not allowed"),
    ],
)
async def test_upload_rejects_invalid_files(
    app: FastAPI,
    client: AsyncClient,
    user_factory: UserFactory,
    content: bytes,
    content_type: str,
    message_fragment: str,
) -> None:
    uploader = FakeUploader()
    _install(app, uploader)
    user = await user_factory()

    response = await client.post(
        "/api/upload",
        files={"file": ("upload.bin", content, content_type)},
        headers=user.headers,
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    errors = response.json()["details"]["errors"]
    assert errors[0]["field"] == "file"
    assert message_fragment in errors[0]["message"]
    assert uploader.calls == []


async def test_upload_rejects_oversized_files(
    app: FastAPI,
    client: AsyncClient,
    user_factory: UserFactory,
) -> None:
    app.state.settings.upload_max_bytes = 8
    uploader = FakeUploader()
    _install(app, uploader)
    user = await user_factory()

    response = await client.post(
        "/api/upload",
        files={"file": ("big.png", b"0123456789", "image/png")},
        headers=user.headers,
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "maximum size" in response.json()["details"]["errors"][0]["message"]


async def test_upload_without_uploader_is_internal_error(
    app: FastAPI,
    client: AsyncClient,
    user_factory: UserFactory,
) -> None:
    _install(app, None)
    user = await user_factory()

    response = await client.post(
        "/api/upload",
        files={"file": ("a.png", b"data", "image/png")},
        headers=user.headers,
    )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["code"] == "uploads_not_configured"


async def test_upload_host_failure_is_generic_internal_error(
    app: FastAPI,
    client: AsyncClient,
    user_factory: UserFactory,
) -> None:
    _install(app, FakeUploader(error=ServiceRequestError("connection reset by storage account xyz")))
    user = await user_factory()

    response = await client.post(
        "/api/upload",
        files={"file": ("a.png", b"data", "image/png")},
        headers=user.headers,
    )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert body["code"] == "upload_failed"
    assert "xyz" not in response.text
