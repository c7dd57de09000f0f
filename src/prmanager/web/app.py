"""FastAPI application factory for PR Manager.

This module provides the application factory that creates and configures
a FastAPI application with:
- CORS middleware for cross-origin requests
- Request logging middleware with correlation IDs
- Database connection lifecycle management
- Error mapping to ``{"error": {"code", "message"}}`` bodies
- Team, user, pull request, health, stats and metrics endpoints

Example usage:
    >>> from prmanager.config import PRManagerConfig
    >>> from prmanager.web.app import create_app
    >>>
    >>> app = create_app(PRManagerConfig())
    >>>
    >>> import uvicorn
    >>> uvicorn.run(app, host="0.0.0.0", port=8080)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import make_url

from prmanager import __version__
from prmanager.config import PRManagerConfig
from prmanager.database.connection import create_schema, get_engine, get_session_factory
from prmanager.engine.selection import SystemRandomSource
from prmanager.engine.service import ReviewService
from prmanager.logging import get_logger
from prmanager.metrics import ServiceMetrics
from prmanager.web.errors import register_error_handlers
from prmanager.web.middleware import RequestLoggingMiddleware
from prmanager.web.routes.pull_requests import create_pull_requests_router
from prmanager.web.routes.system import create_system_router
from prmanager.web.routes.teams import create_teams_router
from prmanager.web.routes.users import create_users_router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage the database engine and the service façade.

    When the app was created around an injected service, nothing is opened
    here. Otherwise an engine and session factory are created from config,
    the SQL-backed service is stored on app.state, and the engine is
    disposed on shutdown. SQLite databases get their tables created on
    startup; other backends are migrated with Alembic.

    Args:
        app: FastAPI application instance

    Yields:
        None after startup, cleans up on context exit
    """
    config: PRManagerConfig = app.state.config

    if app.state.service is not None:
        logger.info("app_startup_begin", service="injected")
        yield
        logger.info("app_shutdown_begin")
        return

    logger.info("app_startup_begin", host=config.web.host, port=config.web.port)

    engine = get_engine(config.database)
    session_factory = get_session_factory(engine)
    if make_url(config.database.url).get_backend_name() == "sqlite":
        await create_schema(engine)
        logger.info("database_schema_created", backend="sqlite")

    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.service = ReviewService.from_session_factory(
        session_factory,
        metrics=app.state.metrics,
        rng=SystemRandomSource(config.selection.random_seed),
    )

    logger.info(
        "database_pool_initialized",
        pool_size=config.database.pool_size,
        max_overflow=config.database.max_overflow,
    )

    try:
        yield
    finally:
        logger.info("app_shutdown_begin")
        await engine.dispose()
        logger.info("database_pool_disposed")


def create_app(
    config: PRManagerConfig | None = None,
    service: ReviewService | None = None,
    metrics: ServiceMetrics | None = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Args:
        config: Optional PRManagerConfig. If None, creates default config.
        service: Optional pre-built service. When given, the lifespan does
            not open a database connection.
        metrics: Optional metrics whose registry backs /metrics. If None,
            an injected service's own ServiceMetrics is exposed; without a
            service a fresh ServiceMetrics is created when metrics are
            enabled.

    Returns:
        Configured FastAPI application instance.
    """
    if config is None:
        config = PRManagerConfig()

    if metrics is None:
        if service is not None:
            # /metrics must show the counters the injected service increments
            sink = service.metrics
            metrics = sink if isinstance(sink, ServiceMetrics) else None
        elif config.metrics.enabled:
            metrics = ServiceMetrics(config.app.name, namespace=config.metrics.namespace)

    app = FastAPI(
        title="PR Manager",
        version=__version__,
        description="Reviewer assignment and pull request lifecycle service",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.service = service
    app.state.metrics = metrics
    app.state.metrics_registry = metrics.registry if metrics is not None else None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.web.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)

    app.include_router(create_system_router())
    app.include_router(create_teams_router())
    app.include_router(create_users_router())
    app.include_router(create_pull_requests_router())

    logger.info(
        "app_created",
        cors_origins=config.web.cors_origins,
        metrics_enabled=metrics is not None,
        version=__version__,
    )

    return app
