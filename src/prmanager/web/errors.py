"""Mapping of PR Manager errors to HTTP responses.

Every error response has the body ``{"error": {"code": ..., "message": ...}}``.
Storage failures and unexpected exceptions are reported as a generic
``INTERNAL_ERROR`` so driver details never leak to callers.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi import status as http_status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from prmanager.errors import (
    AlreadyMergedError,
    InvalidTransitionError,
    NoAvailableCandidatesError,
    NotFoundError,
    PRManagerError,
    PullRequestExistsError,
    ReviewerNotAssignedError,
    TeamExistsError,
    ValidationError,
)
from prmanager.logging import get_logger
from prmanager.web.auth import AuthError

logger = get_logger(__name__)

CODE_VALIDATION = "VALIDATION"
CODE_TEAM_EXISTS = "TEAM_EXISTS"
CODE_PR_EXISTS = "PR_EXISTS"
CODE_PR_MERGED = "PR_MERGED"
CODE_NOT_ASSIGNED = "NOT_ASSIGNED"
CODE_NO_CANDIDATE = "NO_CANDIDATE"
CODE_INVALID_TRANSITION = "INVALID_TRANSITION"
CODE_NOT_FOUND = "NOT_FOUND"
CODE_INTERNAL = "INTERNAL_ERROR"

# Checked in order; first isinstance match wins
ERROR_MAP: list[tuple[type[PRManagerError], int, str]] = [
    (ValidationError, http_status.HTTP_400_BAD_REQUEST, CODE_VALIDATION),
    (TeamExistsError, http_status.HTTP_400_BAD_REQUEST, CODE_TEAM_EXISTS),
    (PullRequestExistsError, http_status.HTTP_409_CONFLICT, CODE_PR_EXISTS),
    (AlreadyMergedError, http_status.HTTP_409_CONFLICT, CODE_PR_MERGED),
    (ReviewerNotAssignedError, http_status.HTTP_409_CONFLICT, CODE_NOT_ASSIGNED),
    (NoAvailableCandidatesError, http_status.HTTP_409_CONFLICT, CODE_NO_CANDIDATE),
    (InvalidTransitionError, http_status.HTTP_409_CONFLICT, CODE_INVALID_TRANSITION),
    (NotFoundError, http_status.HTTP_404_NOT_FOUND, CODE_NOT_FOUND),
]


def error_body(code: str, message: str) -> dict[str, Any]:
    return {"error": {"code": code, "message": message}}


def map_error(exc: PRManagerError) -> tuple[int, str, str]:
    """Return (status code, error code, message) for a service error."""
    for error_type, status_code, code in ERROR_MAP:
        if isinstance(exc, error_type):
            return status_code, code, str(exc)
    return http_status.HTTP_500_INTERNAL_SERVER_ERROR, CODE_INTERNAL, "internal error"


async def handle_service_error(request: Request, exc: PRManagerError) -> JSONResponse:
    status_code, code, message = map_error(exc)
    if status_code >= 500:
        logger.error("request_error", error_kind=exc.kind, error=str(exc))
    return JSONResponse(status_code=status_code, content=error_body(code, message))


async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse(
        status_code=http_status.HTTP_401_UNAUTHORIZED,
        content=error_body(CODE_NOT_FOUND, str(exc)),
    )


async def handle_request_validation_error(request: Request, exc: Exception) -> JSONResponse:
    # Malformed bodies and wrongly typed fields; empty fields reach the service
    logger.debug("request_body_invalid", error=str(exc))
    return JSONResponse(
        status_code=http_status.HTTP_400_BAD_REQUEST,
        content=error_body(CODE_VALIDATION, "invalid json"),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", error=str(exc), exc_info=exc)
    return JSONResponse(
        status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(CODE_INTERNAL, "internal error"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers on an application."""
    app.add_exception_handler(PRManagerError, handle_service_error)  # type: ignore[arg-type]
    app.add_exception_handler(AuthError, handle_auth_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
