"""Pull request lifecycle state machine for PR Manager.

A pull request is created OPEN with reviewers chosen by the selection
policy, may have individual reviewers replaced while OPEN, and moves
irreversibly to MERGED. MERGED is terminal: merging again re-applies the
same state, and every reviewer edit is rejected.
"""

from __future__ import annotations

from prmanager.domain import PullRequest, PullRequestStatus
from prmanager.engine.directory import TeamDirectory
from prmanager.engine.selection import (
    RandomSource,
    select_initial_reviewers,
    select_replacement_reviewer,
)
from prmanager.errors import (
    AlreadyMergedError,
    InvalidTransitionError,
    ReviewerNotAssignedError,
)
from prmanager.logging import get_logger
from prmanager.repositories.interfaces import PullRequestRepository

logger = get_logger(__name__)


# Authoritative state machine definition
VALID_TRANSITIONS: dict[PullRequestStatus, set[PullRequestStatus]] = {
    PullRequestStatus.OPEN: {PullRequestStatus.MERGED},
    PullRequestStatus.MERGED: {PullRequestStatus.MERGED},  # Terminal; re-merge is a no-op
}

# States in which the reviewer set may change
REVIEWER_EDITABLE: frozenset[PullRequestStatus] = frozenset({PullRequestStatus.OPEN})


def validate_transition(current: PullRequestStatus, target: PullRequestStatus) -> bool:
    """Validate if a state transition is allowed.

    Args:
        current: Current pull request status.
        target: Target pull request status.

    Returns:
        True if the transition is valid according to VALID_TRANSITIONS.
    """
    return target in VALID_TRANSITIONS.get(current, set())


def current_status(pull_request: PullRequest) -> PullRequestStatus:
    """Status used for transition checks, read through the outward label.

    An unknown stored code counts as OPEN, just as it is reported.
    """
    return PullRequestStatus[pull_request.status]


def ensure_reviewers_editable(pull_request: PullRequest) -> None:
    """Reject reviewer edits outside the OPEN state.

    Raises:
        AlreadyMergedError: If the pull request is merged.
    """
    if current_status(pull_request) not in REVIEWER_EDITABLE:
        raise AlreadyMergedError(pull_request.pull_request_id)


class PullRequestStateMachine:
    """Drives pull requests through create, reassign and merge.

    Args:
        pull_requests: Pull request storage.
        directory: Team and user directory.
        rng: Random source for reassignment picks.
    """

    def __init__(
        self,
        pull_requests: PullRequestRepository,
        directory: TeamDirectory,
        rng: RandomSource,
    ) -> None:
        self._pull_requests = pull_requests
        self._directory = directory
        self._rng = rng
        self.logger = logger.bind(component="PullRequestStateMachine")

    async def create(
        self,
        pull_request_id: str,
        pull_request_name: str,
        author_id: str,
    ) -> PullRequest:
        """Create an OPEN pull request with initially assigned reviewers.

        Args:
            pull_request_id: Caller-assigned unique id.
            pull_request_name: Title of the pull request.
            author_id: Id of the authoring user.

        Returns:
            The stored pull request.

        Raises:
            NotFoundError: If the author does not exist or has no team.
            PullRequestExistsError: If the id is already used.
        """
        author = await self._directory.get_user(author_id)
        team_name = await self._directory.resolve_team_of(author.user_id)
        active_members = await self._directory.active_members_of(team_name)

        reviewers = select_initial_reviewers(active_members, author.user_id)
        pull_request = PullRequest(
            pull_request_id=pull_request_id,
            pull_request_name=pull_request_name,
            author_id=author.user_id,
            status_id=PullRequestStatus.OPEN,
            assigned_reviewers=tuple(reviewers),
        )
        await self._pull_requests.create_pull_request(pull_request)

        self.logger.debug(
            "reviewers_assigned",
            pull_request_id=pull_request_id,
            team_name=team_name,
            candidates=len(active_members),
            reviewers=reviewers,
        )
        return pull_request

    async def reassign_reviewer(
        self,
        pull_request_id: str,
        old_user_id: str,
    ) -> tuple[PullRequest, str]:
        """Replace one reviewer with a random eligible member of their team.

        Args:
            pull_request_id: Id of the pull request.
            old_user_id: Reviewer to replace.

        Returns:
            The updated pull request and the id of the new reviewer.

        Raises:
            NotFoundError: If the pull request does not exist, the old
                reviewer has no team, or the slot changed concurrently.
            AlreadyMergedError: If the pull request is merged.
            ReviewerNotAssignedError: If ``old_user_id`` holds no slot.
            NoAvailableCandidatesError: If nobody can take the slot.
        """
        pull_request = await self._pull_requests.get_pull_request(pull_request_id)
        ensure_reviewers_editable(pull_request)

        if old_user_id not in pull_request.assigned_reviewers:
            raise ReviewerNotAssignedError(pull_request_id, old_user_id)

        team_name = await self._directory.resolve_team_of(old_user_id)
        active_members = await self._directory.active_members_of(team_name)

        new_user_id = select_replacement_reviewer(
            active_members,
            old_reviewer_id=old_user_id,
            author_id=pull_request.author_id,
            assigned_reviewers=pull_request.assigned_reviewers,
            rng=self._rng,
            pull_request_id=pull_request_id,
            team_name=team_name,
        )

        await self._pull_requests.replace_reviewer(pull_request_id, old_user_id, new_user_id)
        updated = await self._pull_requests.get_pull_request(pull_request_id)
        return updated, new_user_id

    async def merge(self, pull_request_id: str) -> PullRequest:
        """Move a pull request to MERGED.

        Merging a merged pull request returns it unchanged.

        Raises:
            NotFoundError: If the pull request does not exist.
            InvalidTransitionError: If VALID_TRANSITIONS forbids the change.
        """
        pull_request = await self._pull_requests.get_pull_request(pull_request_id)
        from_status = current_status(pull_request)

        if not validate_transition(from_status, PullRequestStatus.MERGED):
            raise InvalidTransitionError(
                pull_request_id, from_status.name, PullRequestStatus.MERGED.name
            )

        merged = await self._pull_requests.merge_pull_request(pull_request_id)
        self.logger.info(
            "pull_request_transition",
            pull_request_id=pull_request_id,
            from_status=from_status.name,
            to_status=merged.status,
        )
        return merged

    async def list_reviewed_by(self, user_id: str) -> list[PullRequest]:
        """Pull requests where the user holds a reviewer slot, oldest first."""
        return await self._pull_requests.list_by_reviewer(user_id)
