"""Domain model for PR Manager.

Plain immutable values shared by every layer above the database. They
carry no behaviour beyond the status label mapping and the reviewer slot
invariants.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace

MAX_REVIEWERS = 2


class PullRequestStatus(enum.IntEnum):
    """Stored status codes of a pull request."""

    OPEN = 1
    MERGED = 2


def status_label(status_code: int) -> str:
    """Return the outward status label for a stored status code.

    Unknown codes are reported as ``"OPEN"``. Whether a corrupt code should
    instead surface as a storage error is an open question; the lenient
    default is kept so existing rows never fail to render.
    """
    if status_code == PullRequestStatus.MERGED:
        return "MERGED"
    return "OPEN"


@dataclass(frozen=True)
class User:
    """A person who can author or review pull requests."""

    user_id: str
    username: str
    is_active: bool = True


@dataclass(frozen=True)
class Team:
    """A named group of users. Members are ordered by username."""

    team_name: str
    members: tuple[User, ...] = ()


@dataclass(frozen=True)
class ReviewerAssignment:
    """A user occupying a reviewer slot (1-based) of a pull request."""

    pull_request_id: str
    user_id: str
    slot: int


@dataclass(frozen=True)
class PullRequest:
    """A pull request and its assigned reviewers in slot order.

    Raises:
        ValueError: If the reviewers break the slot invariants (more than
            two slots, a duplicate, or the author reviewing their own PR).
    """

    pull_request_id: str
    pull_request_name: str
    author_id: str
    status_id: int = PullRequestStatus.OPEN
    assigned_reviewers: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        reviewers = tuple(self.assigned_reviewers)
        object.__setattr__(self, "assigned_reviewers", reviewers)
        if len(reviewers) > MAX_REVIEWERS:
            raise ValueError(
                f"pull request {self.pull_request_id!r} has {len(reviewers)} reviewers; "
                f"at most {MAX_REVIEWERS} slots exist"
            )
        if len(set(reviewers)) != len(reviewers):
            raise ValueError(f"pull request {self.pull_request_id!r} has duplicate reviewers")
        if self.author_id in reviewers:
            raise ValueError(
                f"author {self.author_id!r} cannot review pull request {self.pull_request_id!r}"
            )

    @property
    def status(self) -> str:
        return status_label(self.status_id)

    @property
    def is_merged(self) -> bool:
        return self.status_id == PullRequestStatus.MERGED

    @property
    def assignments(self) -> tuple[ReviewerAssignment, ...]:
        return tuple(
            ReviewerAssignment(self.pull_request_id, user_id, slot)
            for slot, user_id in enumerate(self.assigned_reviewers, start=1)
        )

    def with_reviewer_replaced(self, old_user_id: str, new_user_id: str) -> PullRequest:
        """Return a copy with ``old_user_id``'s slot given to ``new_user_id``."""
        reviewers = tuple(
            new_user_id if user_id == old_user_id else user_id
            for user_id in self.assigned_reviewers
        )
        return replace(self, assigned_reviewers=reviewers)
