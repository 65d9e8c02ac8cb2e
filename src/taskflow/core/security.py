"""Security helpers for password hashing and JWT token management."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from .config import Settings

BCRYPT_ROUNDS = 10
PASSWORD_MIN_LENGTH = 8

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

_PASSWORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter."),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter."),
    (re.compile(r"[0-9]"), "Password must contain at least one number."),
)


class TokenType(str, Enum):
    """Enumerates supported JWT token types."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(slots=True)
class GeneratedToken:
    """Represents a generated JWT token with associated metadata."""

    token: str
    expires_at: datetime
    jti: str


def get_password_hash(password: str) -> str:
    """Return a bcrypt hash of ``password``."""

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hashed counterpart."""

    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify() -> None:
    """Spend the time of a real verification when there is no hash to check."""

    pwd_context.dummy_verify()


def password_policy_violations(password: str) -> list[str]:
    """Return one message per complexity rule ``password`` breaks."""

    violations: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        violations.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters.")
    for pattern, message in _PASSWORD_RULES:
        if pattern.search(password) is None:
            violations.append(message)
    return violations


def _create_token(
    *,
    subject: str | int,
    role: str,
    settings: Settings,
    token_type: TokenType,
    expires_delta: timedelta | None = None,
) -> GeneratedToken:
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        minutes = (
            settings.access_token_expire_minutes
            if token_type is TokenType.ACCESS
            else settings.refresh_token_expire_minutes
        )
        expires_delta = timedelta(minutes=minutes)
    expire = now + expires_delta
    payload: dict[str, Any] = {
        "sub": str(subject),
        "iat": now,
        "exp": expire,
        "role": role,
        "type": token_type.value,
        "jti": uuid4().hex,
    }
    token = jwt.encode(payload, token_secret(settings, token_type), algorithm=settings.jwt_algorithm)
    return GeneratedToken(token=token, expires_at=expire, jti=payload["jti"])


def token_secret(settings: Settings, token_type: TokenType) -> str:
    """Return the signing secret used for ``token_type``."""

    if token_type is TokenType.ACCESS:
        return settings.jwt_secret_key
    return settings.jwt_refresh_secret_key


def create_access_token(
    *,
    subject: str | int,
    role: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> GeneratedToken:
    """Create a signed JWT access token for the provided subject."""

    return _create_token(
        subject=subject,
        role=role,
        settings=settings,
        token_type=TokenType.ACCESS,
        expires_delta=expires_delta,
    )


def create_refresh_token(
    *,
    subject: str | int,
    role: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> GeneratedToken:
    """Create a signed JWT refresh token for the provided subject."""

    return _create_token(
        subject=subject,
        role=role,
        settings=settings,
        token_type=TokenType.REFRESH,
        expires_delta=expires_delta,
    )


def decode_token(*, token: str, secret: str, algorithm: str) -> dict[str, Any]:
    """Decode a JWT token and return its payload."""

    return jwt.decode(token, secret, algorithms=[algorithm])


__all__ = [
    "BCRYPT_ROUNDS",
    "ExpiredSignatureError",
    "GeneratedToken",
    "JWTError",
    "TokenType",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "dummy_verify",
    "get_password_hash",
    "password_policy_violations",
    "pwd_context",
    "token_secret",
    "verify_password",
]
