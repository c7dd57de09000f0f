"""FastAPI dependencies shared by the PR Manager routers."""

from __future__ import annotations

from fastapi import Request

from prmanager.engine.service import ReviewService


def get_service(request: Request) -> ReviewService:
    """Dependency that retrieves the service façade from app state.

    Args:
        request: FastAPI request object

    Returns:
        ReviewService stored on app.state during startup
    """
    return request.app.state.service  # type: ignore[no-any-return]
