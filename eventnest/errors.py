# -*- coding: utf-8 -*-
"""
Domain errors raised by the services and the handlers that turn them into
HTTP responses.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from eventnest.logging_config import request_id_var, sanitize

logger = logging.getLogger(__name__)


class EventNestError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message=None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)


class Unauthorized(EventNestError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidToken(EventNestError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class Forbidden(EventNestError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access forbidden"


class NotFound(EventNestError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ArtifactMissing(NotFound):
    """A stored row points at an artifact that is not on disk."""

    default_message = "File not found"


class Conflict(EventNestError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Conflict"


class AlreadyCheckedIn(Conflict):
    default_message = "This attendee has already been checked in"

    def __init__(self, checked_in_at, message=None):
        super().__init__(message, checked_in_at=checked_in_at.isoformat() if checked_in_at else None)
        self.checked_in_at = checked_in_at


async def eventnest_error_handler(request: Request, exc: EventNestError):
    body = {"message": exc.message, "request_id": request_id_var.get()}
    body.update(exc.extra)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


def unhandled_error_response(request: Request, exc: Exception, is_production: bool) -> JSONResponse:
    """Logs ``exc`` with the request context and builds the 500 response."""
    user = getattr(request.state, "user", None)
    logger.error(
        "Request error: %s %s params=%s user=%s: %s",
        request.method,
        request.url.path,
        sanitize(dict(request.query_params)),
        getattr(user, "id", None),
        exc,
        exc_info=exc,
    )
    message = "Internal server error" if is_production else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": message, "request_id": request_id_var.get()},
    )
