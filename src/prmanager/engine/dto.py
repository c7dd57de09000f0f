"""Input and output structures of the PR Manager service façade.

Transport adapters translate their wire format into these plain structs
and back. Nothing here knows about HTTP or JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from prmanager.domain import PullRequest, User


# Teams


@dataclass(frozen=True)
class TeamMemberDTO:
    user_id: str
    username: str
    is_active: bool = True

    @classmethod
    def from_user(cls, user: User) -> TeamMemberDTO:
        return cls(user_id=user.user_id, username=user.username, is_active=user.is_active)

    def to_user(self) -> User:
        return User(user_id=self.user_id, username=self.username, is_active=self.is_active)


@dataclass(frozen=True)
class CreateTeamInput:
    team_name: str
    members: list[TeamMemberDTO] = field(default_factory=list)


@dataclass(frozen=True)
class CreateTeamOutput:
    team_name: str
    members: list[TeamMemberDTO]


@dataclass(frozen=True)
class GetTeamInput:
    team_name: str


@dataclass(frozen=True)
class GetTeamOutput:
    team_name: str
    members: list[TeamMemberDTO]


# Users


@dataclass(frozen=True)
class SetUserActiveInput:
    user_id: str
    is_active: bool


@dataclass(frozen=True)
class SetUserActiveOutput:
    user_id: str
    username: str
    team_name: str
    is_active: bool


@dataclass(frozen=True)
class GetUserReviewsInput:
    user_id: str


@dataclass(frozen=True)
class PullRequestShortDTO:
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str

    @classmethod
    def from_domain(cls, pull_request: PullRequest) -> PullRequestShortDTO:
        return cls(
            pull_request_id=pull_request.pull_request_id,
            pull_request_name=pull_request.pull_request_name,
            author_id=pull_request.author_id,
            status=pull_request.status,
        )


@dataclass(frozen=True)
class GetUserReviewsOutput:
    user_id: str
    pull_requests: list[PullRequestShortDTO]


# Pull requests


@dataclass(frozen=True)
class PullRequestDTO:
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str
    assigned_reviewers: list[str]

    @classmethod
    def from_domain(cls, pull_request: PullRequest) -> PullRequestDTO:
        return cls(
            pull_request_id=pull_request.pull_request_id,
            pull_request_name=pull_request.pull_request_name,
            author_id=pull_request.author_id,
            status=pull_request.status,
            assigned_reviewers=list(pull_request.assigned_reviewers),
        )


@dataclass(frozen=True)
class CreatePullRequestInput:
    pull_request_id: str
    pull_request_name: str
    author_id: str


@dataclass(frozen=True)
class CreatePullRequestOutput:
    pr: PullRequestDTO


@dataclass(frozen=True)
class MergePullRequestInput:
    pull_request_id: str


@dataclass(frozen=True)
class MergePullRequestOutput:
    pr: PullRequestDTO


@dataclass(frozen=True)
class ReassignReviewerInput:
    pull_request_id: str
    old_user_id: str


@dataclass(frozen=True)
class ReassignReviewerOutput:
    pr: PullRequestDTO
    replaced_by: str
