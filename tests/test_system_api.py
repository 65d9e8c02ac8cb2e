from __future__ import annotations

import logging
import re

import pytest
from fastapi import status
from httpx import AsyncClient

from taskflow import __version__

from .conftest import UserFactory

pytestmark = pytest.mark.asyncio


async def test_health_check(client: AsyncClient) -> None:
    response = await client.get("/healthz")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == {"status": "ok"}
    assert response.headers["X-Request-ID"]


async def test_root_metadata(client: AsyncClient) -> None:
    response = await client.get("/")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["success"] is True
    assert body["data"] == {
        "name": "TaskFlow",
        "environment": "test",
        "version": __version__,
        "api_prefix": "/api",
    }


async def test_request_id_header_is_echoed(client: AsyncClient) -> None:
    response = await client.get("/healthz", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


async def test_unusable_request_id_is_replaced(client: AsyncClient) -> None:
    response = await client.get("/healthz", headers={"X-Request-ID": "not a safe id"})

    assert re.fullmatch(r"[0-9a-f]{32}", response.headers["X-Request-ID"])


async def test_access_log_records_actor_and_status(
    client: AsyncClient,
    user_factory: UserFactory,
    caplog: pytest.LogCaptureFixture,
) -> None:
    user = await user_factory()

    with caplog.at_level(logging.INFO, logger="taskflow.access"):
        response = await client.get("/api/users/me", headers=user.headers)
        await client.get("/healthz")

    assert response.status_code == status.HTTP_200_OK
    completed = [record for record in caplog.records if record.getMessage() == "Request completed"]
    by_path = {record.path: record for record in completed}
    assert by_path["/api/users/me"].actor_id == user.id
    assert by_path["/api/users/me"].status_code == status.HTTP_200_OK
    assert by_path["/healthz"].actor_id is None
