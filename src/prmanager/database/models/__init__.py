"""SQLAlchemy ORM models for PR Manager.

This module defines the database schema: teams, users, memberships, pull
requests and reviewer assignments.

All models use SQLAlchemy 2.0 declarative style with Mapped[] type annotations.
"""

from prmanager.database.models.base import Base, TimestampMixin
from prmanager.database.models.pull_request import PullRequestRow, ReviewerAssignmentRow
from prmanager.database.models.team import MembershipRow, TeamRow, UserRow

__all__ = [
    "Base",
    "TimestampMixin",
    "TeamRow",
    "UserRow",
    "MembershipRow",
    "PullRequestRow",
    "ReviewerAssignmentRow",
]
