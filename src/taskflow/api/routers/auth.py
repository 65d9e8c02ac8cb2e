"""Routes handling user authentication flows."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...core.config import Settings
from ...deps import DatabaseSessionDependency, SettingsDependency
from ...models import User
from ...schemas import (
    AuthResponse,
    AuthTokens,
    Envelope,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    UserPublic,
)
from ...services import AuthService
from ...services.auth import TokenPair

router = APIRouter(prefix="/auth", tags=["auth"])


def _build_tokens(token_pair: TokenPair, settings: Settings) -> AuthTokens:
    return AuthTokens(
        access_token=token_pair.access.token,
        refresh_token=token_pair.refresh.token,
        expires_in=settings.access_token_expire_minutes * 60,
        refresh_expires_in=settings.refresh_token_expire_minutes * 60,
    )


def _auth_response(user: User, token_pair: TokenPair, settings: Settings) -> AuthResponse:
    return AuthResponse(user=UserPublic.model_validate(user), tokens=_build_tokens(token_pair, settings))


@router.post(
    "/register",
    response_model=Envelope[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(
    payload: RegisterRequest,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
) -> Envelope[AuthResponse]:
    service = AuthService(session, settings)
    user = await service.register_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
    )
    token_pair = service.build_token_pair(user)
    return Envelope[AuthResponse](
        success=True,
        data=_auth_response(user, token_pair, settings),
        message="Account created successfully",
    )


@router.post(
    "/login",
    response_model=Envelope[AuthResponse],
    status_code=status.HTTP_200_OK,
    summary="Authenticate using email and password",
)
async def login(
    payload: LoginRequest,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
) -> Envelope[AuthResponse]:
    service = AuthService(session, settings)
    user = await service.authenticate_user(payload.email, payload.password)
    token_pair = service.build_token_pair(user)
    return Envelope[AuthResponse](success=True, data=_auth_response(user, token_pair, settings))


@router.post(
    "/refresh",
    response_model=Envelope[AuthResponse],
    status_code=status.HTTP_200_OK,
    summary="Refresh access credentials using a refresh token",
)
async def refresh_tokens(
    payload: RefreshRequest,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
) -> Envelope[AuthResponse]:
    service = AuthService(session, settings)
    user, token_pair = await service.refresh_from_token(payload.refresh_token)
    return Envelope[AuthResponse](success=True, data=_auth_response(user, token_pair, settings))
