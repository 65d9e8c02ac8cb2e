"""Authentication service encapsulating registration, login and token flows."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import Settings
from ..core.policy import Actor
from ..core.security import (
    ExpiredSignatureError,
    GeneratedToken,
    JWTError,
    TokenType,
    create_access_token,
    create_refresh_token,
    decode_token,
    dummy_verify,
    password_policy_violations,
    token_secret,
    verify_password,
)
from ..errors import AuthenticationError, ValidationError
from ..models import User
from ..repositories import UserRepository
from ..schemas.auth import TokenPayload
from .users import UserService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


@dataclass(slots=True)
class TokenPair:
    """Container for access and refresh tokens."""

    access: GeneratedToken
    refresh: GeneratedToken


def decode_payload(token: str, settings: Settings, expected_type: TokenType) -> TokenPayload:
    """Verify ``token`` and return its payload, raising ``AuthenticationError`` on any defect."""

    label = "Access" if expected_type is TokenType.ACCESS else "Refresh"
    try:
        raw = decode_token(
            token=token,
            secret=token_secret(settings, expected_type),
            algorithm=settings.jwt_algorithm,
        )
    except ExpiredSignatureError as exc:
        raise AuthenticationError(f"{label} token has expired.") from exc
    except JWTError as exc:
        raise AuthenticationError(f"Invalid {label.lower()} token.") from exc

    try:
        payload = TokenPayload.model_validate(raw)
    except PydanticValidationError as exc:
        raise AuthenticationError(f"Invalid {label.lower()} token.") from exc
    if payload.type is not expected_type:
        raise AuthenticationError(f"Invalid token type for {label.lower()} use.")
    if not payload.sub.isdigit():
        raise AuthenticationError("Invalid token subject.")
    return payload


def resolve_identity(token: str | None, settings: Settings) -> Actor:
    """Derive the acting identity from a bearer access token.

    No storage lookup happens here: the role is the one captured when the token
    was issued and is refreshed only when the client exchanges its refresh
    token.
    """

    if not token:
        raise AuthenticationError("Not authenticated.")
    payload = decode_payload(token, settings, TokenType.ACCESS)
    return Actor(id=int(payload.sub), role=payload.role)


class AuthService:
    """High-level authentication workflows."""

    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._user_service = UserService(session)
        self._user_repository = UserRepository(session)

    async def register_user(self, *, name: str, email: str, password: str) -> User:
        violations = password_policy_violations(password)
        if violations:
            raise ValidationError.for_field("password", *violations)
        return await self._user_service.create_user(email=email, password=password, name=name)

    async def authenticate_user(self, email: str, password: str) -> User:
        user = await self._user_service.get_user_by_email(email)
        if user is None:
            dummy_verify()
            logger.warning("Login failed for unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)
        if not verify_password(password, user.hashed_password):
            logger.warning("Login failed", extra={"user_id": user.id})
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)
        logger.info("User logged in", extra={"user_id": user.id})
        return user

    def build_token_pair(self, user: User) -> TokenPair:
        if user.id is None:
            raise ValueError("User must be persisted before issuing tokens.")
        access = create_access_token(
            subject=user.id,
            role=user.role.value,
            settings=self._settings,
        )
        refresh = create_refresh_token(
            subject=user.id,
            role=user.role.value,
            settings=self._settings,
        )
        return TokenPair(access=access, refresh=refresh)

    async def refresh_from_token(self, refresh_token: str) -> tuple[User, TokenPair]:
        """Exchange a refresh token for a new pair carrying the user's current role."""
        payload = decode_payload(refresh_token, self._settings, TokenType.REFRESH)
        user = await self._user_repository.get(int(payload.sub))
        if user is None:
            raise AuthenticationError("User no longer exists.")
        if user.role != payload.role:
            logger.info(
                "Role changed since token issue",
                extra={"user_id": user.id, "previous_role": payload.role.value, "role": user.role.value},
            )
        return user, self.build_token_pair(user)


__all__ = [
    "AuthService",
    "INVALID_CREDENTIALS_MESSAGE",
    "TokenPair",
    "decode_payload",
    "resolve_identity",
]
