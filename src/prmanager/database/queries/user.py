"""User query functions for PR Manager."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from prmanager.database.models.team import MembershipRow, UserRow

logger = structlog.get_logger(__name__)


async def get_user(
    session: AsyncSession,
    user_id: str,
) -> UserRow | None:
    """Retrieve a user by id.

    Args:
        session: Active async database session.
        user_id: Id of the user to retrieve.

    Returns:
        The UserRow if found, None otherwise.
    """
    stmt = select(UserRow).where(UserRow.user_id == user_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def set_user_active(
    session: AsyncSession,
    user_id: str,
    is_active: bool,
) -> UserRow | None:
    """Set a user's activity flag.

    Args:
        session: Active async database session.
        user_id: Id of the user to update.
        is_active: New value of the flag.

    Returns:
        The updated UserRow, or None if the user does not exist.
    """
    user = await get_user(session, user_id)
    if user is None:
        return None

    user.is_active = is_active
    await session.flush()

    logger.debug("user_activity_updated", user_id=user_id, is_active=is_active)
    return user


async def get_team_name(
    session: AsyncSession,
    user_id: str,
) -> str | None:
    """Return the name of the team a user belongs to.

    Args:
        session: Active async database session.
        user_id: Member user id.

    Returns:
        The team name, or None if the user has no membership.
    """
    stmt = select(MembershipRow.team_name).where(MembershipRow.user_id == user_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()
