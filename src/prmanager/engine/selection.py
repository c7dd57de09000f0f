"""Reviewer selection policy for PR Manager.

Two rules, both restricted to the active members of a team:

* Initial assignment takes the first two eligible members in directory
  order (display name), excluding the author. Fewer candidates simply
  means fewer reviewers.
* Reassignment picks uniformly at random among members that are neither
  the reviewer being replaced, the author, nor already assigned.

Randomness comes from an injectable RandomSource so tests can pin the pick.
"""

from __future__ import annotations

import random
from typing import Iterable, Protocol, Sequence

from prmanager.domain import MAX_REVIEWERS, User
from prmanager.errors import NoAvailableCandidatesError


class RandomSource(Protocol):
    """Picks one index out of ``n`` choices."""

    def pick_index(self, n: int) -> int:
        """Return an integer in ``range(n)``. ``n`` is always positive."""
        ...


class SystemRandomSource:
    """RandomSource backed by :class:`random.Random`.

    Args:
        seed: Optional seed for reproducible picks.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed)

    def pick_index(self, n: int) -> int:
        return self._random.randrange(n)


def select_initial_reviewers(
    active_members: Sequence[User],
    author_id: str,
    limit: int = MAX_REVIEWERS,
) -> list[str]:
    """Choose reviewers for a new pull request.

    Args:
        active_members: Active members of the author's team, in directory order.
        author_id: The pull request author, never a reviewer.
        limit: Number of reviewer slots to fill.

    Returns:
        Up to ``limit`` distinct user ids in slot order.
    """
    reviewers: list[str] = []
    for member in active_members:
        if len(reviewers) == limit:
            break
        if member.user_id == author_id or member.user_id in reviewers:
            continue
        reviewers.append(member.user_id)
    return reviewers


def replacement_candidates(
    active_members: Sequence[User],
    old_reviewer_id: str,
    author_id: str,
    assigned_reviewers: Iterable[str],
) -> list[str]:
    """Active members eligible to take over ``old_reviewer_id``'s slot."""
    excluded = {old_reviewer_id, author_id, *assigned_reviewers}
    candidates: list[str] = []
    for member in active_members:
        if member.user_id in excluded or member.user_id in candidates:
            continue
        candidates.append(member.user_id)
    return candidates


def select_replacement_reviewer(
    active_members: Sequence[User],
    old_reviewer_id: str,
    author_id: str,
    assigned_reviewers: Iterable[str],
    rng: RandomSource,
    *,
    pull_request_id: str,
    team_name: str,
) -> str:
    """Pick a random replacement for one reviewer.

    Raises:
        NoAvailableCandidatesError: If nobody is eligible.
    """
    candidates = replacement_candidates(
        active_members, old_reviewer_id, author_id, assigned_reviewers
    )
    if not candidates:
        raise NoAvailableCandidatesError(pull_request_id, team_name)
    return candidates[rng.pick_index(len(candidates))]
