"""Repository interfaces consumed by the PR Manager engine.

Each repository is a Protocol with one production implementation
(prmanager.repositories.sql) and in-memory doubles in the test suite.

Contract shared by every implementation:
- A missing row is reported as NotFoundError, never as a generic error.
- Any other persistence failure is raised as StorageError.
- Writes are atomic: on failure nothing of the call is observable.
- replace_reviewer is a compare-and-swap on the reviewer slot. It is the
  only guard against two concurrent reassignments of the same pull request;
  the engine does no locking of its own.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from prmanager.domain import PullRequest, Team, User


@runtime_checkable
class TeamRepository(Protocol):
    """Team storage."""

    async def create_team(self, team_name: str, members: Sequence[User]) -> None:
        """Create a team and upsert its members in one unit.

        Raises:
            TeamExistsError: If the team name is already taken.
            StorageError: On any other persistence failure.
        """
        ...

    async def get_team(self, team_name: str) -> Team:
        """Return a team with its members ordered by username.

        Raises:
            NotFoundError: If the team does not exist.
        """
        ...


@runtime_checkable
class UserRepository(Protocol):
    """User lookups and activity toggling."""

    async def get_user(self, user_id: str) -> User:
        """Raises NotFoundError if the user does not exist."""
        ...

    async def set_is_active(self, user_id: str, is_active: bool) -> tuple[User, str]:
        """Update the flag and return the user with their team name.

        The team name is "" when the user has no membership.

        Raises:
            NotFoundError: If the user does not exist.
        """
        ...

    async def get_team_name(self, user_id: str) -> str:
        """Raises NotFoundError if the user has no team."""
        ...


@runtime_checkable
class PullRequestRepository(Protocol):
    """Pull request and reviewer slot storage."""

    async def create_pull_request(self, pull_request: PullRequest) -> None:
        """Raises PullRequestExistsError if the id is already used."""
        ...

    async def get_pull_request(self, pull_request_id: str) -> PullRequest:
        """Raises NotFoundError if the pull request does not exist."""
        ...

    async def merge_pull_request(self, pull_request_id: str) -> PullRequest:
        """Mark as MERGED and return it. Raises NotFoundError if absent."""
        ...

    async def list_by_reviewer(self, user_id: str) -> list[PullRequest]:
        """Pull requests reviewed by the user, oldest first."""
        ...

    async def replace_reviewer(
        self, pull_request_id: str, old_user_id: str, new_user_id: str
    ) -> None:
        """Swap one reviewer slot atomically.

        Raises:
            NotFoundError: If ``old_user_id`` no longer holds a slot on an
                open pull request.
        """
        ...

    async def active_team_members(self, team_name: str) -> list[User]:
        """Active members of a team ordered by username."""
        ...
