"""Database layer for PR Manager.

This module handles database connections and session management, and
exposes the SQLAlchemy async engine configuration and ORM models.

Public API:
    get_engine: Create an AsyncEngine from DatabaseConfig.
    get_session_factory: Create an async_sessionmaker from an engine.
    create_schema: Create all tables from ORM metadata.
    Base: SQLAlchemy declarative base for all models.
"""

from prmanager.database.connection import create_schema, get_engine, get_session_factory
from prmanager.database.models import (
    Base,
    MembershipRow,
    PullRequestRow,
    ReviewerAssignmentRow,
    TeamRow,
    TimestampMixin,
    UserRow,
)

__all__ = [
    "get_engine",
    "get_session_factory",
    "create_schema",
    "Base",
    "TimestampMixin",
    "TeamRow",
    "UserRow",
    "MembershipRow",
    "PullRequestRow",
    "ReviewerAssignmentRow",
]
