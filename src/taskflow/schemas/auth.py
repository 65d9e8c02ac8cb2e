"""Schemas describing authentication payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..core.security import TokenType
from ..models import UserRole
from .user import UserPublic


class RegisterRequest(BaseModel):
    """Incoming payload for registering a new user.

    Password complexity is enforced by ``AuthService`` so that every broken
    rule is reported separately.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Alice Example",
                "email": "alice@example.com",
                "password": "Valid123",
            }
        }
    )

    name: str = Field(min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(max_length=128)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if len(stripped) < 2:
            raise ValueError("Name must be at least 2 characters.")
        return stripped

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(BaseModel):
    """Credentials submitted to obtain a token pair."""

    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.lower()


class RefreshRequest(BaseModel):
    """Request payload for refreshing JWT tokens."""

    refresh_token: str


class AuthTokens(BaseModel):
    """Access and refresh tokens returned to clients."""

    access_token: str
    refresh_token: str
    token_type: str = Field(default="bearer", frozen=True)
    expires_in: int
    refresh_expires_in: int


class AuthResponse(BaseModel):
    """Authentication response containing issued tokens and user metadata."""

    user: UserPublic
    tokens: AuthTokens


class TokenPayload(BaseModel):
    """Validated JWT payload."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    exp: datetime
    iat: datetime
    jti: str
    role: UserRole
    type: TokenType


__all__ = [
    "AuthResponse",
    "AuthTokens",
    "LoginRequest",
    "RefreshRequest",
    "RegisterRequest",
    "TokenPayload",
]
