"""Request correlation and access logging."""

from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .context import (
    REQUEST_ID_HEADER,
    accept_request_id,
    bind_actor_id,
    bind_request_id,
    reset_actor_id,
    reset_request_id,
)

logger = logging.getLogger("taskflow.access")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Give every request a correlation id and log its outcome.

    The id is taken from ``X-Request-ID`` when the client sends a usable one,
    stored on ``request.state`` for the error handlers, and echoed on the
    response.
    """

    def __init__(self, app, header_name: str = REQUEST_ID_HEADER):  # type: ignore[override]
        super().__init__(app)
        self._header_name = header_name

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        request_id = accept_request_id(request.headers.get(self._header_name))
        request.state.request_id = request_id
        request_token = bind_request_id(request_id)
        actor_token = bind_actor_id(None)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    "actor_id": getattr(request.state, "actor_id", None),
                },
            )
        finally:
            reset_actor_id(actor_token)
            reset_request_id(request_token)
        response.headers[self._header_name] = request_id
        return response


__all__ = ["CorrelationIdMiddleware"]
