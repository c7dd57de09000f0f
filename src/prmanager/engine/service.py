"""Service façade for PR Manager.

ReviewService is the single entry point used by transport adapters. Every
operation follows the same pipeline:

1. Structural validation; a ValidationError is raised before any lookup.
2. Delegation to the directory and the pull request state machine.
3. On success, mapping to an output DTO, one completion log event and one
   business counter increment.
4. On failure, the typed error is logged and re-raised unchanged. Nothing
   is retried.

Example:
    >>> service = ReviewService.from_session_factory(session_factory, ServiceMetrics("svc"))
    >>> out = await service.create_pull_request(
    ...     CreatePullRequestInput("pr-1", "Add search", "u1")
    ... )
    >>> out.pr.assigned_reviewers
    ['u2', 'u3']
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from prmanager.engine.directory import TeamDirectory
from prmanager.engine.dto import (
    CreatePullRequestInput,
    CreatePullRequestOutput,
    CreateTeamInput,
    CreateTeamOutput,
    GetTeamInput,
    GetTeamOutput,
    GetUserReviewsInput,
    GetUserReviewsOutput,
    MergePullRequestInput,
    MergePullRequestOutput,
    PullRequestDTO,
    PullRequestShortDTO,
    ReassignReviewerInput,
    ReassignReviewerOutput,
    SetUserActiveInput,
    SetUserActiveOutput,
    TeamMemberDTO,
)
from prmanager.engine.selection import RandomSource, SystemRandomSource
from prmanager.engine.state_machine import PullRequestStateMachine
from prmanager.engine import validators
from prmanager.errors import PRManagerError, StorageError, ValidationError
from prmanager.logging import get_logger
from prmanager.metrics import MetricsSink, NullMetrics
from prmanager.repositories.interfaces import (
    PullRequestRepository,
    TeamRepository,
    UserRepository,
)
from prmanager.repositories.sql import (
    SqlPullRequestRepository,
    SqlTeamRepository,
    SqlUserRepository,
)

logger = get_logger(__name__)


class ReviewService:
    """Business operations on teams, users and pull requests.

    Args:
        teams: Team storage.
        users: User storage.
        pull_requests: Pull request storage.
        metrics: Business counters; defaults to a no-op sink.
        rng: Random source for reviewer reassignment.
    """

    def __init__(
        self,
        teams: TeamRepository,
        users: UserRepository,
        pull_requests: PullRequestRepository,
        metrics: MetricsSink | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self.directory = TeamDirectory(teams, users, pull_requests)
        self.lifecycle = PullRequestStateMachine(
            pull_requests, self.directory, rng or SystemRandomSource()
        )
        self._metrics: MetricsSink = metrics if metrics is not None else NullMetrics()
        self.logger = logger.bind(component="ReviewService")

    @property
    def metrics(self) -> MetricsSink:
        """Sink receiving this service's business counters."""
        return self._metrics

    @classmethod
    def from_session_factory(
        cls,
        session_factory: async_sessionmaker[AsyncSession],
        metrics: MetricsSink | None = None,
        rng: RandomSource | None = None,
    ) -> ReviewService:
        """Build a service over the SQL repositories."""
        return cls(
            teams=SqlTeamRepository(session_factory),
            users=SqlUserRepository(session_factory),
            pull_requests=SqlPullRequestRepository(session_factory),
            metrics=metrics,
            rng=rng,
        )

    @asynccontextmanager
    async def _operation(self, name: str, **fields: Any) -> AsyncIterator[None]:
        """Log start and failure of one operation; errors propagate unchanged."""
        self.logger.info(f"{name}_started", **fields)
        try:
            yield
        except StorageError as exc:
            self.logger.error(f"{name}_failed", error_kind=exc.kind, error=str(exc), **fields)
            raise
        except PRManagerError as exc:
            self.logger.warning(f"{name}_failed", error_kind=exc.kind, error=str(exc), **fields)
            raise

    def _rejected(self, name: str, exc: ValidationError, **fields: Any) -> None:
        self.logger.warning(f"{name}_rejected", field=exc.field, error=str(exc), **fields)

    # Teams

    async def create_team(self, data: CreateTeamInput) -> CreateTeamOutput:
        """Create a team and upsert its members.

        Raises:
            ValidationError: If team_name or a member's user_id is empty.
            TeamExistsError: If the team already exists.
        """
        try:
            validators.validate_create_team_input(data)
        except ValidationError as exc:
            self._rejected("create_team", exc, team_name=data.team_name)
            raise

        async with self._operation(
            "create_team", team_name=data.team_name, members_count=len(data.members)
        ):
            team = await self.directory.create_team(
                data.team_name, [member.to_user() for member in data.members]
            )

        out = CreateTeamOutput(
            team_name=team.team_name,
            members=[TeamMemberDTO.from_user(member) for member in team.members],
        )
        self.logger.info(
            "create_team_completed", team_name=out.team_name, members_count=len(out.members)
        )
        self._metrics.inc_team_created()
        return out

    async def get_team(self, data: GetTeamInput) -> GetTeamOutput:
        """Return a team with members ordered by username.

        Raises:
            ValidationError: If team_name is empty.
            NotFoundError: If the team does not exist.
        """
        try:
            validators.validate_get_team_input(data)
        except ValidationError as exc:
            self._rejected("get_team", exc)
            raise

        async with self._operation("get_team", team_name=data.team_name):
            team = await self.directory.get_team(data.team_name)

        out = GetTeamOutput(
            team_name=team.team_name,
            members=[TeamMemberDTO.from_user(member) for member in team.members],
        )
        self.logger.info(
            "get_team_completed", team_name=out.team_name, members_count=len(out.members)
        )
        return out

    # Users

    async def set_user_active(self, data: SetUserActiveInput) -> SetUserActiveOutput:
        """Toggle whether a user can be picked as a reviewer.

        Raises:
            ValidationError: If user_id is empty.
            NotFoundError: If the user does not exist.
        """
        try:
            validators.validate_set_user_active_input(data)
        except ValidationError as exc:
            self._rejected("set_user_active", exc)
            raise

        async with self._operation(
            "set_user_active", user_id=data.user_id, is_active=data.is_active
        ):
            user, team_name = await self.directory.set_user_active(data.user_id, data.is_active)

        out = SetUserActiveOutput(
            user_id=user.user_id,
            username=user.username,
            team_name=team_name,
            is_active=user.is_active,
        )
        self.logger.info(
            "set_user_active_completed",
            user_id=out.user_id,
            is_active=out.is_active,
            team_name=out.team_name,
        )
        if data.is_active:
            self._metrics.inc_user_activated()
        else:
            self._metrics.inc_user_deactivated()
        return out

    async def get_user_reviews(self, data: GetUserReviewsInput) -> GetUserReviewsOutput:
        """List pull requests the user reviews, oldest first.

        Raises:
            ValidationError: If user_id is empty.
        """
        try:
            validators.validate_get_user_reviews_input(data)
        except ValidationError as exc:
            self._rejected("get_user_reviews", exc)
            raise

        async with self._operation("get_user_reviews", user_id=data.user_id):
            pull_requests = await self.lifecycle.list_reviewed_by(data.user_id)

        out = GetUserReviewsOutput(
            user_id=data.user_id,
            pull_requests=[PullRequestShortDTO.from_domain(pr) for pr in pull_requests],
        )
        self.logger.info(
            "get_user_reviews_completed", user_id=out.user_id, pr_count=len(out.pull_requests)
        )
        return out

    # Pull requests

    async def create_pull_request(self, data: CreatePullRequestInput) -> CreatePullRequestOutput:
        """Create an OPEN pull request with up to two reviewers.

        Raises:
            ValidationError: If an id or the name is empty.
            NotFoundError: If the author does not exist or has no team.
            PullRequestExistsError: If the id is already used.
        """
        try:
            validators.validate_create_pull_request_input(data)
        except ValidationError as exc:
            self._rejected("create_pull_request", exc, pull_request_id=data.pull_request_id)
            raise

        async with self._operation(
            "create_pull_request",
            pull_request_id=data.pull_request_id,
            pull_request_name=data.pull_request_name,
            author_id=data.author_id,
        ):
            pull_request = await self.lifecycle.create(
                data.pull_request_id, data.pull_request_name, data.author_id
            )

        out = CreatePullRequestOutput(pr=PullRequestDTO.from_domain(pull_request))
        self.logger.info(
            "create_pull_request_completed",
            pull_request_id=out.pr.pull_request_id,
            author_id=out.pr.author_id,
            assigned_reviewers=out.pr.assigned_reviewers,
        )
        self._metrics.inc_pull_request_created()
        return out

    async def merge_pull_request(self, data: MergePullRequestInput) -> MergePullRequestOutput:
        """Mark a pull request as MERGED.

        Raises:
            ValidationError: If pull_request_id is empty.
            NotFoundError: If the pull request does not exist.
            InvalidTransitionError: If the current status may not move to MERGED.
        """
        try:
            validators.validate_merge_pull_request_input(data)
        except ValidationError as exc:
            self._rejected("merge_pull_request", exc)
            raise

        async with self._operation("merge_pull_request", pull_request_id=data.pull_request_id):
            pull_request = await self.lifecycle.merge(data.pull_request_id)

        out = MergePullRequestOutput(pr=PullRequestDTO.from_domain(pull_request))
        self.logger.info(
            "merge_pull_request_completed",
            pull_request_id=out.pr.pull_request_id,
            status=out.pr.status,
        )
        self._metrics.inc_pull_request_merged()
        return out

    async def reassign_reviewer(self, data: ReassignReviewerInput) -> ReassignReviewerOutput:
        """Replace one reviewer with a random eligible teammate.

        Raises:
            ValidationError: If pull_request_id or old_user_id is empty.
            NotFoundError: If the pull request is missing or the reviewer has no team.
            AlreadyMergedError: If the pull request is merged.
            ReviewerNotAssignedError: If old_user_id is not a reviewer.
            NoAvailableCandidatesError: If nobody can take the slot.
        """
        try:
            validators.validate_reassign_reviewer_input(data)
        except ValidationError as exc:
            self._rejected("reassign_reviewer", exc, pull_request_id=data.pull_request_id)
            raise

        async with self._operation(
            "reassign_reviewer",
            pull_request_id=data.pull_request_id,
            old_user_id=data.old_user_id,
        ):
            pull_request, new_user_id = await self.lifecycle.reassign_reviewer(
                data.pull_request_id, data.old_user_id
            )

        out = ReassignReviewerOutput(
            pr=PullRequestDTO.from_domain(pull_request), replaced_by=new_user_id
        )
        self.logger.info(
            "reassign_reviewer_completed",
            pull_request_id=out.pr.pull_request_id,
            old_user_id=data.old_user_id,
            new_user_id=out.replaced_by,
        )
        self._metrics.inc_pull_request_reassigned()
        return out
