"""Repository boundary between the engine and persistence.

Public API:
    TeamRepository, UserRepository, PullRequestRepository: Protocols.
    SqlTeamRepository, SqlUserRepository, SqlPullRequestRepository:
        SQLAlchemy implementations.
"""

from prmanager.repositories.interfaces import (
    PullRequestRepository,
    TeamRepository,
    UserRepository,
)
from prmanager.repositories.sql import (
    SqlPullRequestRepository,
    SqlTeamRepository,
    SqlUserRepository,
)

__all__ = [
    "TeamRepository",
    "UserRepository",
    "PullRequestRepository",
    "SqlTeamRepository",
    "SqlUserRepository",
    "SqlPullRequestRepository",
]
