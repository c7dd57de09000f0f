"""Pull request and reviewer assignment query functions for PR Manager.

Provides async functions for inserting pull requests with their reviewer
slots, merging, listing by reviewer, and swapping a single reviewer.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from prmanager.database.models.pull_request import PullRequestRow, ReviewerAssignmentRow
from prmanager.domain import PullRequest, PullRequestStatus

logger = structlog.get_logger(__name__)


async def insert_pull_request(
    session: AsyncSession,
    pull_request: PullRequest,
) -> PullRequestRow:
    """Insert a pull request and one assignment row per reviewer slot.

    A duplicate pull request id surfaces as IntegrityError at flush time.

    Args:
        session: Active async database session.
        pull_request: Domain pull request to persist.

    Returns:
        The newly created PullRequestRow.
    """
    row = PullRequestRow(
        pull_request_id=pull_request.pull_request_id,
        pull_request_name=pull_request.pull_request_name,
        author_id=pull_request.author_id,
        status_id=int(pull_request.status_id),
        assignments=[
            ReviewerAssignmentRow(
                pull_request_id=assignment.pull_request_id,
                user_id=assignment.user_id,
                slot=assignment.slot,
            )
            for assignment in pull_request.assignments
        ],
    )
    session.add(row)
    await session.flush()

    logger.debug(
        "pull_request_inserted",
        pull_request_id=row.pull_request_id,
        reviewers=list(pull_request.assigned_reviewers),
    )
    return row


async def get_pull_request(
    session: AsyncSession,
    pull_request_id: str,
) -> PullRequestRow | None:
    """Retrieve a pull request with its reviewer slots.

    Args:
        session: Active async database session.
        pull_request_id: Id of the pull request.

    Returns:
        The PullRequestRow if found, None otherwise.
    """
    stmt = select(PullRequestRow).where(PullRequestRow.pull_request_id == pull_request_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def mark_merged(
    session: AsyncSession,
    pull_request_id: str,
) -> PullRequestRow | None:
    """Set a pull request's status to MERGED.

    merged_at keeps the time of the first merge; merging again re-applies
    the terminal status without touching it.

    Args:
        session: Active async database session.
        pull_request_id: Id of the pull request.

    Returns:
        The updated PullRequestRow, or None if it does not exist.
    """
    row = await get_pull_request(session, pull_request_id)
    if row is None:
        return None

    row.status_id = int(PullRequestStatus.MERGED)
    if row.merged_at is None:
        row.merged_at = datetime.now(timezone.utc)
    await session.flush()
    return row


async def list_pull_requests_by_reviewer(
    session: AsyncSession,
    user_id: str,
) -> list[PullRequestRow]:
    """List pull requests where the user occupies any reviewer slot.

    Args:
        session: Active async database session.
        user_id: Reviewer user id.

    Returns:
        PullRequestRow instances ordered by creation time, oldest first.
    """
    stmt = (
        select(PullRequestRow)
        .join(
            ReviewerAssignmentRow,
            ReviewerAssignmentRow.pull_request_id == PullRequestRow.pull_request_id,
        )
        .where(ReviewerAssignmentRow.user_id == user_id)
        .order_by(PullRequestRow.created_at.asc(), PullRequestRow.pull_request_id.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def replace_reviewer(
    session: AsyncSession,
    pull_request_id: str,
    old_user_id: str,
    new_user_id: str,
) -> int:
    """Hand the old reviewer's slot to a new reviewer.

    The single guarded UPDATE acts as a compare-and-swap: it only matches
    while ``old_user_id`` still holds a slot on an open pull request, so a
    concurrent replacement or merge makes it match nothing.

    Args:
        session: Active async database session.
        pull_request_id: Id of the pull request.
        old_user_id: Reviewer being replaced.
        new_user_id: Replacement reviewer.

    Returns:
        Number of slots updated (0 or 1).
    """
    open_pull_request = (
        select(PullRequestRow.pull_request_id)
        .where(PullRequestRow.pull_request_id == pull_request_id)
        .where(PullRequestRow.status_id != int(PullRequestStatus.MERGED))
    )
    stmt = (
        update(ReviewerAssignmentRow)
        .where(ReviewerAssignmentRow.pull_request_id == pull_request_id)
        .where(ReviewerAssignmentRow.user_id == old_user_id)
        .where(ReviewerAssignmentRow.pull_request_id.in_(open_pull_request))
        .values(user_id=new_user_id)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    return result.rowcount
