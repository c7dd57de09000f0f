"""Structural validation of service inputs.

Each validator raises ValidationError naming the first missing field and
runs before any lookup or mutation.
"""

from __future__ import annotations

from prmanager.engine.dto import (
    CreatePullRequestInput,
    CreateTeamInput,
    GetTeamInput,
    GetUserReviewsInput,
    MergePullRequestInput,
    ReassignReviewerInput,
    SetUserActiveInput,
)
from prmanager.errors import ValidationError


def _require(value: str | None, field: str) -> None:
    if not value:
        raise ValidationError(field)


def validate_create_team_input(data: CreateTeamInput) -> None:
    _require(data.team_name, "team_name")
    for member in data.members:
        _require(member.user_id, "user_id")


def validate_get_team_input(data: GetTeamInput) -> None:
    _require(data.team_name, "team_name")


def validate_set_user_active_input(data: SetUserActiveInput) -> None:
    _require(data.user_id, "user_id")


def validate_get_user_reviews_input(data: GetUserReviewsInput) -> None:
    _require(data.user_id, "user_id")


def validate_create_pull_request_input(data: CreatePullRequestInput) -> None:
    _require(data.pull_request_id, "pull_request_id")
    _require(data.pull_request_name, "pull_request_name")
    _require(data.author_id, "author_id")


def validate_merge_pull_request_input(data: MergePullRequestInput) -> None:
    _require(data.pull_request_id, "pull_request_id")


def validate_reassign_reviewer_input(data: ReassignReviewerInput) -> None:
    _require(data.pull_request_id, "pull_request_id")
    _require(data.old_user_id, "old_user_id")
