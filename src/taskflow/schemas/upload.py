"""Schemas for file uploads."""

from __future__ import annotations

from pydantic import BaseModel, Field


class UploadResult(BaseModel):
    """Location of a stored file as reported by the upload host."""

    url: str = Field(description="Publicly reachable URL of the stored file")
    public_id: str = Field(description="Identifier of the file within the upload host")


__all__ = ["UploadResult"]
