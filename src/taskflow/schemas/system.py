"""Common system-level response models."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Uniform response shape shared by every endpoint."""

    success: bool = Field(description="Whether the operation succeeded")
    data: DataT | None = Field(default=None, description="Operation result payload")
    error: str | None = Field(default=None, description="Human-readable error message")
    message: str | None = Field(default=None, description="Human-readable success message")
    code: str | None = Field(default=None, description="Machine-readable error identifier")
    details: Any | None = Field(
        default=None,
        description="Structured error context such as per-field errors and the request id.",
    )


class RootResponse(BaseModel):
    """Metadata payload returned by the root endpoint."""

    name: str = Field(description="Human-friendly service name")
    environment: str = Field(description="Deployment environment identifier")
    version: str = Field(description="Semantic version of the service")
    api_prefix: str = Field(description="Base path for API routes")


class HealthCheckResponse(BaseModel):
    """Payload returned by the health check endpoint."""

    status: str = Field(default="ok", description="Service health indicator")


__all__ = ["Envelope", "HealthCheckResponse", "RootResponse"]
