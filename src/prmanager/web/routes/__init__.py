"""FastAPI route definitions for the PR Manager HTTP API."""

from __future__ import annotations

from prmanager.web.routes.pull_requests import (
    PullRequestResponse,
    PullRequestSchema,
    ReassignResponse,
    create_pull_requests_router,
)
from prmanager.web.routes.system import (
    HealthResponse,
    ReadinessResponse,
    StatsResponse,
    create_system_router,
)
from prmanager.web.routes.teams import TeamResponse, TeamSchema, create_teams_router
from prmanager.web.routes.users import UserResponse, UserReviewsResponse, create_users_router

__all__ = [
    # Teams
    "TeamSchema",
    "TeamResponse",
    "create_teams_router",
    # Users
    "UserResponse",
    "UserReviewsResponse",
    "create_users_router",
    # Pull requests
    "PullRequestSchema",
    "PullRequestResponse",
    "ReassignResponse",
    "create_pull_requests_router",
    # System
    "HealthResponse",
    "ReadinessResponse",
    "StatsResponse",
    "create_system_router",
]
