"""Per-request identifiers shared with log records and error envelopes.

The correlation middleware binds the request id for the whole request; the
authentication dependency binds the actor id once the bearer token has been
resolved. Both fall back to neutral values outside a request.
"""

from __future__ import annotations

import re
import uuid
from contextvars import ContextVar, Token

REQUEST_ID_HEADER = "X-Request-ID"
NO_REQUEST_ID = "-"

# Client-supplied ids end up in logs and response headers.
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

_request_id: ContextVar[str] = ContextVar("taskflow_request_id", default=NO_REQUEST_ID)
_actor_id: ContextVar[int | None] = ContextVar("taskflow_actor_id", default=None)


def new_request_id() -> str:
    return uuid.uuid4().hex


def accept_request_id(candidate: str | None) -> str:
    """Return ``candidate`` when it is a safe correlation id, otherwise a fresh one."""
    if candidate and _REQUEST_ID_PATTERN.match(candidate):
        return candidate
    return new_request_id()


def get_request_id() -> str:
    return _request_id.get()


def bind_request_id(request_id: str) -> Token[str]:
    return _request_id.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    _request_id.reset(token)


def get_actor_id() -> int | None:
    """Return the id of the authenticated actor for the current request, if any."""
    return _actor_id.get()


def bind_actor_id(actor_id: int | None) -> Token[int | None]:
    return _actor_id.set(actor_id)


def reset_actor_id(token: Token[int | None]) -> None:
    _actor_id.reset(token)


__all__ = [
    "NO_REQUEST_ID",
    "REQUEST_ID_HEADER",
    "accept_request_id",
    "bind_actor_id",
    "bind_request_id",
    "get_actor_id",
    "get_request_id",
    "new_request_id",
    "reset_actor_id",
    "reset_request_id",
]
