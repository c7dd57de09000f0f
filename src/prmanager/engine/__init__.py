"""Reviewer assignment engine for PR Manager.

Public API:
    ReviewService: Façade used by transport adapters.
    TeamDirectory: Team, user and membership lookups.
    PullRequestStateMachine: Create, reassign and merge lifecycle.
    RandomSource, SystemRandomSource: Reassignment randomness.
"""

from prmanager.engine.directory import TeamDirectory
from prmanager.engine.selection import (
    RandomSource,
    SystemRandomSource,
    select_initial_reviewers,
    select_replacement_reviewer,
)
from prmanager.engine.service import ReviewService
from prmanager.engine.state_machine import (
    VALID_TRANSITIONS,
    PullRequestStateMachine,
    validate_transition,
)

__all__ = [
    "ReviewService",
    "TeamDirectory",
    "PullRequestStateMachine",
    "VALID_TRANSITIONS",
    "validate_transition",
    "RandomSource",
    "SystemRandomSource",
    "select_initial_reviewers",
    "select_replacement_reviewer",
]
