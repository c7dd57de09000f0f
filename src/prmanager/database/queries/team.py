"""Team, user and membership query functions for PR Manager.

Provides async functions for creating teams, upserting users and linking
memberships. Functions never open or commit transactions; the caller owns
the unit of work so a team and all of its members land atomically.
"""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from prmanager.database.models.team import MembershipRow, TeamRow, UserRow

logger = structlog.get_logger(__name__)


async def get_team(
    session: AsyncSession,
    team_name: str,
) -> TeamRow | None:
    """Retrieve a team by name.

    Args:
        session: Active async database session.
        team_name: Name of the team to retrieve.

    Returns:
        The TeamRow if found, None otherwise.
    """
    stmt = select(TeamRow).where(TeamRow.team_name == team_name)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def insert_team(
    session: AsyncSession,
    team_name: str,
) -> TeamRow:
    """Insert a new team row.

    A duplicate name surfaces as IntegrityError at flush time.

    Args:
        session: Active async database session.
        team_name: Unique team name.

    Returns:
        The newly created TeamRow.
    """
    team = TeamRow(team_name=team_name)
    session.add(team)
    await session.flush()
    return team


async def upsert_user(
    session: AsyncSession,
    user_id: str,
    username: str,
    is_active: bool,
) -> UserRow:
    """Insert a user, or update the name and activity flag of an existing one.

    Args:
        session: Active async database session.
        user_id: Externally assigned user id.
        username: Display name.
        is_active: Whether the user is available for review.

    Returns:
        The inserted or updated UserRow.
    """
    user = await session.get(UserRow, user_id)
    if user is None:
        user = UserRow(user_id=user_id, username=username, is_active=is_active)
        session.add(user)
    else:
        user.username = username
        user.is_active = is_active
    await session.flush()
    return user


async def set_membership(
    session: AsyncSession,
    user_id: str,
    team_name: str,
) -> MembershipRow:
    """Link a user to a team, moving them out of any previous team.

    Args:
        session: Active async database session.
        user_id: Member user id.
        team_name: Team to join.

    Returns:
        The user's MembershipRow.
    """
    membership = await session.get(MembershipRow, user_id)
    if membership is None:
        membership = MembershipRow(user_id=user_id, team_name=team_name)
        session.add(membership)
    elif membership.team_name != team_name:
        logger.info(
            "membership_moved",
            user_id=user_id,
            old_team=membership.team_name,
            new_team=team_name,
        )
        membership.team_name = team_name
    await session.flush()
    return membership


async def list_team_members(
    session: AsyncSession,
    team_name: str,
    active_only: bool = False,
) -> list[UserRow]:
    """List the members of a team ordered by display name.

    Ties on the display name are broken by user id so the order is fully
    deterministic.

    Args:
        session: Active async database session.
        team_name: Team to list.
        active_only: If True, only users with is_active set are returned.

    Returns:
        List of UserRow instances.
    """
    stmt = (
        select(UserRow)
        .join(MembershipRow, MembershipRow.user_id == UserRow.user_id)
        .where(MembershipRow.team_name == team_name)
    )
    if active_only:
        stmt = stmt.where(UserRow.is_active.is_(True))
    stmt = stmt.order_by(UserRow.username.asc(), UserRow.user_id.asc())

    result = await session.execute(stmt)
    return list(result.scalars().all())
