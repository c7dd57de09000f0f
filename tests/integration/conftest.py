"""Pytest fixtures for integration tests.

Provides async database fixtures for testing query functions, repositories
and the HTTP API against an in-memory SQLite database. Production runs on
PostgreSQL; the schema only uses portable column types so the same ORM
metadata serves both.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from prometheus_client import CollectorRegistry
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from prmanager.config import PRManagerConfig
from prmanager.database.connection import create_schema, get_session_factory
from prmanager.engine.selection import SystemRandomSource
from prmanager.engine.service import ReviewService
from prmanager.metrics import ServiceMetrics
from prmanager.web.app import create_app


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite async engine with the schema applied.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.

    Yields:
        Configured AsyncEngine instance using in-memory SQLite.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(test_engine)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return get_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a session for query-level tests.

    The session is rolled back after the test completes.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def metrics() -> ServiceMetrics:
    return ServiceMetrics("pr-manager-service", registry=CollectorRegistry())


@pytest_asyncio.fixture
async def sql_service(
    session_factory: async_sessionmaker[AsyncSession],
    metrics: ServiceMetrics,
) -> ReviewService:
    """ReviewService wired to the SQL repositories with a seeded random source."""
    return ReviewService.from_session_factory(
        session_factory, metrics=metrics, rng=SystemRandomSource(seed=1234)
    )


@pytest_asyncio.fixture
async def async_client(
    sql_service: ReviewService,
    metrics: ServiceMetrics,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for the app backed by SQLite.

    Yields:
        AsyncClient configured to test the application.
    """
    app = create_app(PRManagerConfig(), service=sql_service, metrics=metrics)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
