"""Unit tests for the reviewer selection policy.

Tests cover:
- Initial assignment order, author exclusion and short teams
- Replacement candidate filtering
- Random pick delegation and the no-candidate failure
"""

from __future__ import annotations

import pytest

from prmanager.domain import User
from prmanager.engine.selection import (
    SystemRandomSource,
    replacement_candidates,
    select_initial_reviewers,
    select_replacement_reviewer,
)
from prmanager.errors import NoAvailableCandidatesError

from tests.unit.fakes import ScriptedRandomSource


def _members(*user_ids: str) -> list[User]:
    return [User(user_id=uid, username=f"name-{uid}") for uid in user_ids]


class TestSelectInitialReviewers:
    """Test initial reviewer assignment."""

    def test_takes_first_two_excluding_author(self) -> None:
        assert select_initial_reviewers(_members("u1", "u2", "u3", "u4"), "u1") == ["u2", "u3"]

    def test_author_in_middle_is_skipped(self) -> None:
        assert select_initial_reviewers(_members("u2", "u1", "u3"), "u1") == ["u2", "u3"]

    @pytest.mark.parametrize(
        "members,expected",
        [
            (("u1",), []),
            (("u1", "u2"), ["u2"]),
            ((), []),
        ],
    )
    def test_short_team_yields_fewer_reviewers(
        self, members: tuple[str, ...], expected: list[str]
    ) -> None:
        """Fewer eligible members is not an error."""
        assert select_initial_reviewers(_members(*members), "u1") == expected

    def test_is_deterministic(self) -> None:
        members = _members("u1", "u2", "u3", "u4", "u5")
        first = select_initial_reviewers(members, "u3")
        assert all(select_initial_reviewers(members, "u3") == first for _ in range(10))

    def test_duplicate_members_not_assigned_twice(self) -> None:
        members = _members("u2", "u2", "u3")
        assert select_initial_reviewers(members, "u1") == ["u2", "u3"]


class TestReplacementCandidates:
    """Test the candidate pool for reassignment."""

    def test_excludes_old_author_and_assigned(self) -> None:
        candidates = replacement_candidates(
            _members("u1", "u2", "u3", "u4"),
            old_reviewer_id="u2",
            author_id="u1",
            assigned_reviewers=("u2", "u3"),
        )
        assert candidates == ["u4"]

    def test_empty_when_everyone_excluded(self) -> None:
        candidates = replacement_candidates(
            _members("u1", "u2", "u3"),
            old_reviewer_id="u2",
            author_id="u1",
            assigned_reviewers=("u2", "u3"),
        )
        assert candidates == []


class TestSelectReplacementReviewer:
    """Test the random replacement pick."""

    def test_uses_random_index(self) -> None:
        rng = ScriptedRandomSource(1)
        picked = select_replacement_reviewer(
            _members("u1", "u2", "u4", "u5", "u6"),
            old_reviewer_id="u2",
            author_id="u1",
            assigned_reviewers=("u2",),
            rng=rng,
            pull_request_id="pr-1",
            team_name="backend",
        )
        assert picked == "u5"
        assert rng.calls == [3]

    def test_no_candidates_raises(self) -> None:
        rng = ScriptedRandomSource()
        with pytest.raises(NoAvailableCandidatesError) as exc_info:
            select_replacement_reviewer(
                _members("u1", "u2"),
                old_reviewer_id="u2",
                author_id="u1",
                assigned_reviewers=("u2",),
                rng=rng,
                pull_request_id="pr-1",
                team_name="backend",
            )
        assert exc_info.value.team_name == "backend"
        assert exc_info.value.pull_request_id == "pr-1"
        assert rng.calls == []

    def test_pick_always_within_candidates(self) -> None:
        """With real randomness the pick is always an eligible member."""
        rng = SystemRandomSource()
        members = _members("u1", "u2", "u3", "u4", "u5", "u6")
        for _ in range(50):
            picked = select_replacement_reviewer(
                members,
                old_reviewer_id="u2",
                author_id="u1",
                assigned_reviewers=("u2", "u3"),
                rng=rng,
                pull_request_id="pr-1",
                team_name="backend",
            )
            assert picked in {"u4", "u5", "u6"}


class TestSystemRandomSource:
    """Test the default random source."""

    def test_seeded_sources_agree(self) -> None:
        a = SystemRandomSource(seed=42)
        b = SystemRandomSource(seed=42)
        assert [a.pick_index(10) for _ in range(20)] == [b.pick_index(10) for _ in range(20)]

    def test_index_in_range(self) -> None:
        rng = SystemRandomSource()
        assert all(0 <= rng.pick_index(3) < 3 for _ in range(100))
