"""Unit tests for the ReviewService façade.

Tests cover:
- Every operation's success path and output mapping
- Error propagation for each failure kind
- Exactly one business counter per successful mutation
- Structured log events for started/failed/completed
- End-to-end scenarios across teams, activity and pull requests
"""

from __future__ import annotations

from typing import Iterator

import pytest
import structlog
from structlog.testing import capture_logs

from prmanager.domain import User
from prmanager.engine.dto import (
    CreatePullRequestInput,
    CreateTeamInput,
    GetTeamInput,
    GetUserReviewsInput,
    MergePullRequestInput,
    ReassignReviewerInput,
    SetUserActiveInput,
    TeamMemberDTO,
)
from prmanager.engine.selection import SystemRandomSource
from prmanager.engine.service import ReviewService
from prmanager.errors import (
    AlreadyMergedError,
    NoAvailableCandidatesError,
    NotFoundError,
    PullRequestExistsError,
    ReviewerNotAssignedError,
    StorageError,
    TeamExistsError,
    ValidationError,
)
from tests.unit.fakes import (
    InMemoryPullRequestRepository,
    InMemoryStore,
    InMemoryTeamRepository,
    InMemoryUserRepository,
    RecordingMetrics,
    ScriptedRandomSource,
)


@pytest.fixture(autouse=True)
def default_structlog() -> Iterator[None]:
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


def _member(user_id: str, username: str, is_active: bool = True) -> TeamMemberDTO:
    return TeamMemberDTO(user_id=user_id, username=username, is_active=is_active)


async def _create_backend(service: ReviewService) -> None:
    await service.create_team(
        CreateTeamInput(
            team_name="backend",
            members=[
                _member("u1", "Alice"),
                _member("u2", "Bob"),
                _member("u3", "Carol"),
                _member("u4", "Dave"),
            ],
        )
    )


class TestCreateTeam:
    """Test create_team."""

    @pytest.mark.asyncio
    async def test_creates_team(self, service: ReviewService, metrics: RecordingMetrics) -> None:
        out = await service.create_team(
            CreateTeamInput(
                team_name="payments",
                members=[_member("u1", "Alice"), _member("u2", "Bob", is_active=False)],
            )
        )

        assert out.team_name == "payments"
        assert [(m.user_id, m.is_active) for m in out.members] == [("u1", True), ("u2", False)]
        assert metrics.counts == {"team_created": 1}

    @pytest.mark.asyncio
    async def test_output_matches_get_team(self, service: ReviewService) -> None:
        created = await service.create_team(
            CreateTeamInput(
                "backend",
                [_member("u3", "Carol"), _member("u1", "Alice"), _member("u3", "Caroline")],
            )
        )

        fetched = await service.get_team(GetTeamInput("backend"))

        assert [m.user_id for m in created.members] == ["u1", "u3"]
        assert created.members[1].username == "Caroline"
        assert created.members == fetched.members

    @pytest.mark.asyncio
    async def test_duplicate_team_writes_nothing(
        self, service: ReviewService, metrics: RecordingMetrics, store: InMemoryStore
    ) -> None:
        await service.create_team(CreateTeamInput("payments", [_member("u1", "Alice")]))

        with pytest.raises(TeamExistsError):
            await service.create_team(CreateTeamInput("payments", [_member("u9", "Zed")]))

        assert "u9" not in store.users
        assert metrics.counts == {"team_created": 1}

    @pytest.mark.asyncio
    async def test_validation_before_storage(
        self, service: ReviewService, store: InMemoryStore, metrics: RecordingMetrics
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create_team(CreateTeamInput("", [_member("u1", "Alice")]))

        assert exc_info.value.field == "team_name"
        assert store.teams == set()
        assert metrics.counts == {}

    @pytest.mark.asyncio
    async def test_member_without_id_rejected(self, service: ReviewService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create_team(CreateTeamInput("payments", [_member("", "Alice")]))
        assert exc_info.value.field == "user_id"


class TestGetTeam:
    """Test get_team."""

    @pytest.mark.asyncio
    async def test_members_sorted_by_username(self, service: ReviewService) -> None:
        await service.create_team(
            CreateTeamInput("backend", [_member("u2", "Bob"), _member("u1", "Alice")])
        )

        out = await service.get_team(GetTeamInput("backend"))

        assert [m.username for m in out.members] == ["Alice", "Bob"]

    @pytest.mark.asyncio
    async def test_missing_team(self, service: ReviewService) -> None:
        with pytest.raises(NotFoundError):
            await service.get_team(GetTeamInput("missing"))

    @pytest.mark.asyncio
    async def test_reads_do_not_count(
        self, service: ReviewService, metrics: RecordingMetrics
    ) -> None:
        await _create_backend(service)
        await service.get_team(GetTeamInput("backend"))
        await service.get_user_reviews(GetUserReviewsInput("u2"))
        assert metrics.counts == {"team_created": 1}


class TestSetUserActive:
    """Test set_user_active."""

    @pytest.mark.asyncio
    async def test_deactivate_and_activate(
        self, service: ReviewService, metrics: RecordingMetrics
    ) -> None:
        await _create_backend(service)

        out = await service.set_user_active(SetUserActiveInput("u2", False))
        assert (out.user_id, out.username, out.team_name, out.is_active) == (
            "u2",
            "Bob",
            "backend",
            False,
        )

        out = await service.set_user_active(SetUserActiveInput("u2", True))
        assert out.is_active is True
        assert metrics.counts == {
            "team_created": 1,
            "user_deactivated": 1,
            "user_activated": 1,
        }

    @pytest.mark.asyncio
    async def test_unknown_user(self, service: ReviewService, metrics: RecordingMetrics) -> None:
        with pytest.raises(NotFoundError):
            await service.set_user_active(SetUserActiveInput("ghost", True))
        assert metrics.counts == {}

    @pytest.mark.asyncio
    async def test_user_without_team_reports_empty_team(
        self, service: ReviewService, store: InMemoryStore
    ) -> None:
        store.users["u9"] = User("u9", "Loner")
        out = await service.set_user_active(SetUserActiveInput("u9", False))
        assert out.team_name == ""


class TestCreatePullRequest:
    """Test create_pull_request."""

    @pytest.mark.asyncio
    async def test_assigns_first_two_teammates(
        self, service: ReviewService, metrics: RecordingMetrics
    ) -> None:
        await _create_backend(service)

        out = await service.create_pull_request(CreatePullRequestInput("pr-1", "Add search", "u1"))

        assert out.pr.pull_request_id == "pr-1"
        assert out.pr.pull_request_name == "Add search"
        assert out.pr.author_id == "u1"
        assert out.pr.status == "OPEN"
        assert out.pr.assigned_reviewers == ["u2", "u3"]
        assert metrics.counts["pull_request_created"] == 1

    @pytest.mark.asyncio
    async def test_payments_scenario(self, service: ReviewService) -> None:
        """Inactive members and the author are never assigned."""
        await service.create_team(
            CreateTeamInput(
                "payments",
                [_member("u1", "A"), _member("u2", "B"), _member("u3", "C", is_active=False)],
            )
        )

        out = await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "u1"))

        assert out.pr.assigned_reviewers == ["u2"]

    @pytest.mark.asyncio
    async def test_solo_author_gets_no_reviewers(self, service: ReviewService) -> None:
        await service.create_team(CreateTeamInput("solo", [_member("u1", "A")]))
        out = await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "u1"))
        assert out.pr.assigned_reviewers == []

    @pytest.mark.asyncio
    async def test_duplicate_id(self, service: ReviewService, metrics: RecordingMetrics) -> None:
        await _create_backend(service)
        await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "u1"))

        with pytest.raises(PullRequestExistsError):
            await service.create_pull_request(CreatePullRequestInput("pr-1", "y", "u2"))
        assert metrics.counts["pull_request_created"] == 1

    @pytest.mark.asyncio
    async def test_unknown_author(self, service: ReviewService) -> None:
        with pytest.raises(NotFoundError):
            await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "ghost"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data,field",
        [
            (CreatePullRequestInput("", "x", "u1"), "pull_request_id"),
            (CreatePullRequestInput("pr-1", "", "u1"), "pull_request_name"),
            (CreatePullRequestInput("pr-1", "x", ""), "author_id"),
        ],
    )
    async def test_validation(
        self, service: ReviewService, data: CreatePullRequestInput, field: str
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create_pull_request(data)
        assert exc_info.value.field == field


class TestMergePullRequest:
    """Test merge_pull_request."""

    @pytest.mark.asyncio
    async def test_merge_twice(self, service: ReviewService, metrics: RecordingMetrics) -> None:
        await _create_backend(service)
        await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "u1"))

        first = await service.merge_pull_request(MergePullRequestInput("pr-1"))
        second = await service.merge_pull_request(MergePullRequestInput("pr-1"))

        assert first.pr.status == "MERGED"
        assert second.pr == first.pr
        assert metrics.counts["pull_request_merged"] == 2

    @pytest.mark.asyncio
    async def test_merge_missing(self, service: ReviewService) -> None:
        with pytest.raises(NotFoundError):
            await service.merge_pull_request(MergePullRequestInput("missing"))


class TestReassignReviewer:
    """Test reassign_reviewer."""

    @pytest.mark.asyncio
    async def test_backend_scenario(
        self, service: ReviewService, metrics: RecordingMetrics
    ) -> None:
        """u1 is the author and u3 already reviews, so only u4 can replace u2."""
        await _create_backend(service)
        await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "u1"))

        out = await service.reassign_reviewer(ReassignReviewerInput("pr-1", "u2"))

        assert out.replaced_by == "u4"
        assert out.pr.assigned_reviewers == ["u4", "u3"]
        assert metrics.counts["pull_request_reassigned"] == 1

    @pytest.mark.asyncio
    async def test_random_pick_among_candidates(
        self,
        team_repo: InMemoryTeamRepository,
        user_repo: InMemoryUserRepository,
        pr_repo: InMemoryPullRequestRepository,
    ) -> None:
        service = ReviewService(team_repo, user_repo, pr_repo, rng=SystemRandomSource())
        await service.create_team(
            CreateTeamInput(
                "big", [_member(f"u{i}", f"name-{i}") for i in range(1, 8)]
            )
        )
        await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "u1"))

        out = await service.reassign_reviewer(ReassignReviewerInput("pr-1", "u2"))

        assert out.replaced_by in {"u4", "u5", "u6", "u7"}
        assert "u2" not in out.pr.assigned_reviewers
        assert "u1" not in out.pr.assigned_reviewers
        assert len(set(out.pr.assigned_reviewers)) == 2

    @pytest.mark.asyncio
    async def test_scripted_pick(
        self,
        team_repo: InMemoryTeamRepository,
        user_repo: InMemoryUserRepository,
        pr_repo: InMemoryPullRequestRepository,
    ) -> None:
        rng = ScriptedRandomSource(2)
        service = ReviewService(team_repo, user_repo, pr_repo, rng=rng)
        await service.create_team(
            CreateTeamInput("big", [_member(f"u{i}", f"name-{i}") for i in range(1, 7)])
        )
        await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "u1"))

        out = await service.reassign_reviewer(ReassignReviewerInput("pr-1", "u3"))

        # candidates are u4, u5, u6 in username order
        assert rng.calls == [3]
        assert out.replaced_by == "u6"
        assert out.pr.assigned_reviewers == ["u2", "u6"]

    @pytest.mark.asyncio
    async def test_merged_pull_request(
        self,
        service: ReviewService,
        metrics: RecordingMetrics,
        pr_repo: InMemoryPullRequestRepository,
    ) -> None:
        await _create_backend(service)
        created = await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "u1"))
        await service.merge_pull_request(MergePullRequestInput("pr-1"))

        with pytest.raises(AlreadyMergedError):
            await service.reassign_reviewer(ReassignReviewerInput("pr-1", "u2"))
        assert "pull_request_reassigned" not in metrics.counts

        stored = await pr_repo.get_pull_request("pr-1")
        assert list(stored.assigned_reviewers) == created.pr.assigned_reviewers
        assert pr_repo.replace_calls == []

    @pytest.mark.asyncio
    async def test_not_assigned(self, service: ReviewService) -> None:
        await _create_backend(service)
        await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "u1"))

        with pytest.raises(ReviewerNotAssignedError):
            await service.reassign_reviewer(ReassignReviewerInput("pr-1", "u4"))

    @pytest.mark.asyncio
    async def test_no_candidate(self, service: ReviewService) -> None:
        await service.create_team(
            CreateTeamInput("trio", [_member("u1", "A"), _member("u2", "B"), _member("u3", "C")])
        )
        await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "u1"))

        with pytest.raises(NoAvailableCandidatesError):
            await service.reassign_reviewer(ReassignReviewerInput("pr-1", "u2"))

        reviews = await service.get_user_reviews(GetUserReviewsInput("u2"))
        assert [p.pull_request_id for p in reviews.pull_requests] == ["pr-1"]

    @pytest.mark.asyncio
    async def test_deactivated_reviewers_not_candidates(self, service: ReviewService) -> None:
        await _create_backend(service)
        await service.create_pull_request(CreatePullRequestInput("pr-1", "x", "u1"))
        await service.set_user_active(SetUserActiveInput("u4", False))

        with pytest.raises(NoAvailableCandidatesError):
            await service.reassign_reviewer(ReassignReviewerInput("pr-1", "u2"))


class TestGetUserReviews:
    """Test get_user_reviews."""

    @pytest.mark.asyncio
    async def test_lists_open_and_merged(self, service: ReviewService) -> None:
        await _create_backend(service)
        await service.create_pull_request(CreatePullRequestInput("pr-1", "First", "u1"))
        await service.create_pull_request(CreatePullRequestInput("pr-2", "Second", "u1"))
        await service.merge_pull_request(MergePullRequestInput("pr-1"))

        out = await service.get_user_reviews(GetUserReviewsInput("u2"))

        assert out.user_id == "u2"
        assert [(p.pull_request_id, p.status) for p in out.pull_requests] == [
            ("pr-1", "MERGED"),
            ("pr-2", "OPEN"),
        ]

    @pytest.mark.asyncio
    async def test_unknown_user_has_no_reviews(self, service: ReviewService) -> None:
        out = await service.get_user_reviews(GetUserReviewsInput("ghost"))
        assert out.pull_requests == []


class TestLogging:
    """Test structured log events emitted by the façade."""

    @pytest.mark.asyncio
    async def test_success_events(self, service: ReviewService) -> None:
        with capture_logs() as logs:
            await service.create_team(CreateTeamInput("payments", [_member("u1", "Alice")]))

        events = [entry["event"] for entry in logs]
        assert "create_team_started" in events
        assert "create_team_completed" in events
        completed = next(e for e in logs if e["event"] == "create_team_completed")
        assert completed["team_name"] == "payments"
        assert completed["members_count"] == 1

    @pytest.mark.asyncio
    async def test_business_failure_logged_as_warning(self, service: ReviewService) -> None:
        with capture_logs() as logs:
            with pytest.raises(NotFoundError):
                await service.merge_pull_request(MergePullRequestInput("missing"))

        failed = next(e for e in logs if e["event"] == "merge_pull_request_failed")
        assert failed["log_level"] == "warning"
        assert failed["error_kind"] == "not_found"

    @pytest.mark.asyncio
    async def test_validation_logged_as_rejected(self, service: ReviewService) -> None:
        with capture_logs() as logs:
            with pytest.raises(ValidationError):
                await service.get_team(GetTeamInput(""))

        events = [entry["event"] for entry in logs]
        assert events == ["get_team_rejected"]

    @pytest.mark.asyncio
    async def test_storage_failure_logged_as_error(
        self,
        team_repo: InMemoryTeamRepository,
        user_repo: InMemoryUserRepository,
        pr_repo: InMemoryPullRequestRepository,
        metrics: RecordingMetrics,
    ) -> None:
        async def broken_get_team(team_name: str):
            raise StorageError("get_team", "OperationalError")

        team_repo.get_team = broken_get_team  # type: ignore[method-assign]
        service = ReviewService(team_repo, user_repo, pr_repo, metrics=metrics)

        with capture_logs() as logs:
            with pytest.raises(StorageError):
                await service.get_team(GetTeamInput("backend"))

        failed = next(e for e in logs if e["event"] == "get_team_failed")
        assert failed["log_level"] == "error"
        assert failed["error_kind"] == "storage"
