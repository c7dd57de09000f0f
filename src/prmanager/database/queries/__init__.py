"""Database query functions for PR Manager.

This module provides async query functions for all database entities:
- Team creation, user upsert and membership linking
- User lookup, activity toggling and team resolution
- Pull request creation, merge, reviewer listing and replacement
"""

from prmanager.database.queries.pull_request import (
    get_pull_request,
    insert_pull_request,
    list_pull_requests_by_reviewer,
    mark_merged,
    replace_reviewer,
)
from prmanager.database.queries.team import (
    get_team,
    insert_team,
    list_team_members,
    set_membership,
    upsert_user,
)
from prmanager.database.queries.user import get_team_name, get_user, set_user_active

__all__ = [
    # Team queries
    "get_team",
    "insert_team",
    "upsert_user",
    "set_membership",
    "list_team_members",
    # User queries
    "get_user",
    "set_user_active",
    "get_team_name",
    # Pull request queries
    "insert_pull_request",
    "get_pull_request",
    "mark_merged",
    "list_pull_requests_by_reviewer",
    "replace_reviewer",
]
