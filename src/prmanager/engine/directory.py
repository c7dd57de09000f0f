"""Team and user directory for PR Manager.

Resolves identity and membership facts for the rest of the engine: team
creation and lookup, user activation, a user's single team, and the active
members eligible for review.
"""

from __future__ import annotations

from typing import Sequence

from prmanager.domain import Team, User
from prmanager.logging import get_logger
from prmanager.repositories.interfaces import (
    PullRequestRepository,
    TeamRepository,
    UserRepository,
)

logger = get_logger(__name__)


def stored_members(members: Sequence[User]) -> tuple[User, ...]:
    """Collapse members by user id and order them as the directory lists them."""
    by_id = {member.user_id: member for member in members}
    return tuple(sorted(by_id.values(), key=lambda u: (u.username, u.user_id)))


class TeamDirectory:
    """Facade over the team and user repositories.

    Args:
        teams: Team storage.
        users: User storage.
        pull_requests: Pull request storage, which also answers the
            active-members query used for reviewer selection.
    """

    def __init__(
        self,
        teams: TeamRepository,
        users: UserRepository,
        pull_requests: PullRequestRepository,
    ) -> None:
        self._teams = teams
        self._users = users
        self._pull_requests = pull_requests
        self.logger = logger.bind(component="TeamDirectory")

    async def create_team(self, team_name: str, members: Sequence[User]) -> Team:
        """Create a team, upserting every member.

        Returns:
            The team as get_team reports it: one entry per user id (the
            last occurrence wins, like the upsert) ordered by username.

        Raises:
            TeamExistsError: If the name is taken. No member is written.
        """
        await self._teams.create_team(team_name, members)
        return Team(team_name=team_name, members=stored_members(members))

    async def get_team(self, team_name: str) -> Team:
        """Raises NotFoundError if the team does not exist."""
        return await self._teams.get_team(team_name)

    async def get_user(self, user_id: str) -> User:
        """Raises NotFoundError if the user does not exist."""
        return await self._users.get_user(user_id)

    async def set_user_active(self, user_id: str, is_active: bool) -> tuple[User, str]:
        """Toggle a user's availability.

        Returns:
            The updated user and their team name ("" when the user has no
            team, which is not an error).

        Raises:
            NotFoundError: If the user does not exist.
        """
        return await self._users.set_is_active(user_id, is_active)

    async def resolve_team_of(self, user_id: str) -> str:
        """Return the team a user belongs to.

        Raises:
            NotFoundError: If the user has no membership.
        """
        return await self._users.get_team_name(user_id)

    async def active_members_of(self, team_name: str) -> list[User]:
        """Active members of a team ordered by username; may be empty."""
        members = await self._pull_requests.active_team_members(team_name)
        self.logger.debug("active_members_resolved", team_name=team_name, count=len(members))
        return members
