"""Shared fixtures for unit tests.

Provides in-memory implementations of the repository protocols and a
scripted random source, so engine and service behaviour can be tested
without a database.
"""

from __future__ import annotations

import pytest

from prmanager.engine.service import ReviewService
from tests.unit.fakes import (
    InMemoryPullRequestRepository,
    InMemoryStore,
    InMemoryTeamRepository,
    InMemoryUserRepository,
    RecordingMetrics,
    ScriptedRandomSource,
)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def team_repo(store: InMemoryStore) -> InMemoryTeamRepository:
    return InMemoryTeamRepository(store)


@pytest.fixture
def user_repo(store: InMemoryStore) -> InMemoryUserRepository:
    return InMemoryUserRepository(store)


@pytest.fixture
def pr_repo(store: InMemoryStore) -> InMemoryPullRequestRepository:
    return InMemoryPullRequestRepository(store)


@pytest.fixture
def rng() -> ScriptedRandomSource:
    return ScriptedRandomSource()


@pytest.fixture
def metrics() -> RecordingMetrics:
    return RecordingMetrics()


@pytest.fixture
def service(
    team_repo: InMemoryTeamRepository,
    user_repo: InMemoryUserRepository,
    pr_repo: InMemoryPullRequestRepository,
    metrics: RecordingMetrics,
    rng: ScriptedRandomSource,
) -> ReviewService:
    """ReviewService over in-memory repositories."""
    return ReviewService(team_repo, user_repo, pr_repo, metrics=metrics, rng=rng)
