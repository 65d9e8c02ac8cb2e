"""Application-level exception taxonomy and handlers.

Every failure that reaches the HTTP boundary is rendered as the uniform
envelope ``{success: false, error, code, details}``. Server-side failures are
logged with request context and surface only a generic message.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import (
    REQUEST_ID_HEADER,
    bind_actor_id,
    bind_request_id,
    reset_actor_id,
    reset_request_id,
)
from .schemas.system import Envelope

logger = logging.getLogger(__name__)


class ApplicationError(Exception):
    """Base class for domain-specific errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "application_error",
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        self.headers = dict(headers) if headers else None


class AuthenticationError(ApplicationError):
    """Missing, invalid or expired credentials."""

    def __init__(self, message: str = "Could not validate credentials.", *, details: Any | None = None) -> None:
        super().__init__(
            message,
            code="unauthenticated",
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            headers={"WWW-Authenticate": "Bearer"},
        )


class PermissionDeniedError(ApplicationError):
    """Authenticated actor is not allowed to perform the operation."""

    def __init__(self, message: str = "Forbidden.", *, details: Any | None = None) -> None:
        super().__init__(
            message,
            code="forbidden",
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
        )


class NotFoundError(ApplicationError):
    """Error representing missing resources."""

    def __init__(
        self,
        message: str = "Resource not found.",
        *,
        code: str = "not_found",
        details: Any | None = None,
    ) -> None:
        super().__init__(
            message,
            code=code,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class ValidationError(ApplicationError):
    """Error representing input validation failures with per-field messages."""

    def __init__(
        self,
        message: str = "Invalid input data.",
        *,
        code: str = "validation_error",
        errors: Sequence[Mapping[str, Any]] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=code,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"errors": [dict(item) for item in errors]} if errors else None,
        )

    @classmethod
    def for_field(cls, field: str, *messages: str) -> "ValidationError":
        """Build an error carrying one or more messages for a single field."""
        return cls(errors=[{"field": field, "message": message} for message in messages])


class ConflictError(ApplicationError):
    """A uniqueness constraint would be violated."""

    def __init__(self, message: str = "Resource already exists.", *, details: Any | None = None) -> None:
        super().__init__(
            message,
            code="conflict",
            status_code=status.HTTP_409_CONFLICT,
            details=details,
        )


class SelfDeletionError(ApplicationError):
    """An administrator attempted to delete their own account."""

    def __init__(self, message: str = "You cannot delete your own admin account.") -> None:
        super().__init__(
            message,
            code="self_deletion",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class ServerError(ApplicationError):
    """Error representing unexpected server failures."""

    def __init__(
        self,
        message: str = "Internal server error.",
        *,
        code: str = "server_error",
        details: Any | None = None,
    ) -> None:
        super().__init__(
            message,
            code=code,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


# Statuses Starlette raises on its own (unknown route, wrong method, bad header).
_HTTP_STATUS_CODE_MAP: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthenticated",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}


@contextmanager
def _request_context(request: Request) -> Iterator[None]:
    """Re-bind the request and actor ids for handlers that run outside the middleware."""
    request_id = getattr(request.state, "request_id", None)
    request_token = bind_request_id(request_id) if request_id else None
    actor_token = bind_actor_id(getattr(request.state, "actor_id", None))
    try:
        yield
    finally:
        reset_actor_id(actor_token)
        if request_token is not None:
            reset_request_id(request_token)


def _log_failure(request: Request, status_code: int, code: str, exc: BaseException | None = None) -> None:
    extra = {"code": code, "status_code": status_code, "method": request.method, "path": request.url.path}
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Request failed", exc_info=exc, extra=extra)
    else:
        logger.warning("Request rejected", extra=extra)


def _error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: Any | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Render the failure envelope, adding the request id to ``details`` and the headers."""
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        if details is None:
            details = {"request_id": request_id}
        elif isinstance(details, dict):
            details = {**details, "request_id": details.get("request_id", request_id)}
        else:
            details = {"request_id": request_id, "detail": details}
    payload = Envelope[None](success=False, error=message, code=code, details=details)
    response = JSONResponse(status_code=status_code, content=payload.model_dump(mode="json"))
    if headers:
        response.headers.update(headers)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def _field_errors(raw_errors: Sequence[Mapping[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``{field, message}`` pairs keyed by the payload field name."""
    formatted: list[dict[str, str]] = []
    for error in raw_errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = str(error.get("msg", "Invalid value."))
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        formatted.append({"field": ".".join(location) or "__root__", "message": message})
    return formatted


def _http_exception_message(status_code: int, detail: Any) -> tuple[str, Any | None]:
    if isinstance(detail, str):
        return detail, None
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        phrase = "Error"
    return phrase, None if detail is None else {"detail": detail}


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure reaching the HTTP boundary as the error envelope."""

    @app.exception_handler(ApplicationError)
    async def _handle_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
        with _request_context(request):
            _log_failure(request, exc.status_code, exc.code, exc)
            return _error_response(
                request,
                status_code=exc.status_code,
                code=exc.code,
                message=exc.message,
                details=exc.details,
                headers=exc.headers,
            )

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        with _request_context(request):
            errors = _field_errors(exc.errors())
            _log_failure(request, status.HTTP_422_UNPROCESSABLE_ENTITY, "validation_error")
            return _error_response(
                request,
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                code="validation_error",
                message="Invalid input data.",
                details={"errors": errors},
            )

    @app.exception_handler(IntegrityError)
    async def _handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
        with _request_context(request):
            _log_failure(request, status.HTTP_409_CONFLICT, "db_integrity_error")
            return _error_response(
                request,
                status_code=status.HTTP_409_CONFLICT,
                code="db_integrity_error",
                message="Database integrity violation.",
            )

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        with _request_context(request):
            code = _HTTP_STATUS_CODE_MAP.get(exc.status_code, "http_error")
            message, details = _http_exception_message(exc.status_code, exc.detail)
            _log_failure(request, exc.status_code, code)
            return _error_response(
                request,
                status_code=exc.status_code,
                code=code,
                message=message,
                details=details,
                headers=exc.headers or None,
            )

    @app.exception_handler(Exception)
    async def _handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        with _request_context(request):
            logger.exception(
                "Unhandled application error.",
                extra={"method": request.method, "path": request.url.path},
            )
            return _error_response(
                request,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                code="server_error",
                message="Internal server error.",
            )


__all__ = [
    "ApplicationError",
    "AuthenticationError",
    "ConflictError",
    "NotFoundError",
    "PermissionDeniedError",
    "SelfDeletionError",
    "ServerError",
    "ValidationError",
    "register_exception_handlers",
]
