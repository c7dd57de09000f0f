"""Operational endpoints for PR Manager.

Routes:
    GET /health - Liveness check
    GET /health/ready - Readiness check with database verification
    GET /stats - Service name, version and current UTC time
    GET /metrics - Prometheus exposition of the business counters
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi import status as http_status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel
from sqlalchemy import text

from prmanager.logging import get_logger

logger = get_logger(__name__)


class HealthResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    """Readiness check response model.

    Attributes:
        status: "ok" or "unhealthy"
        database: "connected", "disconnected" or "unmanaged" when the app
            was built around an injected service
    """

    status: str
    database: str


class StatsResponse(BaseModel):
    service: str
    version: str
    time: str


def create_system_router() -> APIRouter:
    """Create the router with health, stats and metrics endpoints.

    Returns:
        Configured APIRouter.
    """
    router = APIRouter(tags=["system"])

    @router.get("/health", response_model=HealthResponse)
    async def health() -> dict[str, Any]:
        return {"status": "ok"}

    @router.get("/health/ready", response_model=ReadinessResponse)
    async def readiness(request: Request) -> dict[str, Any]:
        """Readiness check with database connectivity verification."""
        session_factory = getattr(request.app.state, "session_factory", None)
        if session_factory is None:
            return {"status": "ok", "database": "unmanaged"}

        try:
            async with session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:
            logger.warning("readiness_check_failed", database="disconnected", error=str(exc))
            return {"status": "unhealthy", "database": "disconnected"}

        logger.debug("readiness_check_passed", database="connected")
        return {"status": "ok", "database": "connected"}

    @router.get("/stats", response_model=StatsResponse)
    async def stats(request: Request) -> dict[str, Any]:
        config = request.app.state.config
        return {
            "service": config.app.name,
            "version": config.app.version,
            "time": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        }

    @router.get("/metrics")
    async def metrics(request: Request) -> Response:
        registry = getattr(request.app.state, "metrics_registry", None)
        if registry is None:
            return Response(status_code=http_status.HTTP_404_NOT_FOUND)
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    return router
