"""SQLAlchemy implementations of the PR Manager repositories.

Each public method runs in its own session and transaction. Driver errors
are translated at this boundary: unique-key violations on insert become
TeamExistsError / PullRequestExistsError, absent rows become NotFoundError
and everything else becomes StorageError.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from prmanager.database.models.pull_request import PullRequestRow
from prmanager.database.models.team import UserRow
from prmanager.database.queries import pull_request as pr_queries
from prmanager.database.queries import team as team_queries
from prmanager.database.queries import user as user_queries
from prmanager.domain import PullRequest, Team, User
from prmanager.errors import (
    NotFoundError,
    PRManagerError,
    PullRequestExistsError,
    StorageError,
    TeamExistsError,
)
from prmanager.logging import get_logger

logger = get_logger(__name__)


def to_user(row: UserRow) -> User:
    return User(user_id=row.user_id, username=row.username, is_active=row.is_active)


def to_pull_request(row: PullRequestRow) -> PullRequest:
    return PullRequest(
        pull_request_id=row.pull_request_id,
        pull_request_name=row.pull_request_name,
        author_id=row.author_id,
        status_id=row.status_id,
        assigned_reviewers=tuple(a.user_id for a in row.assignments),
    )


class _SqlRepository:
    """Shared transaction handling for the SQL repositories."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Open a session and transaction, translating driver errors.

        PRManagerError raised inside the block passes through unchanged
        after the rollback.
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except PRManagerError:
            raise
        except SQLAlchemyError as exc:
            logger.error("repository_storage_error", operation=operation, error=str(exc))
            raise StorageError(operation, type(exc).__name__) from exc


class SqlTeamRepository(_SqlRepository):
    """TeamRepository backed by SQLAlchemy."""

    async def create_team(self, team_name: str, members: Sequence[User]) -> None:
        try:
            async with self._transaction("create_team") as session:
                if await team_queries.get_team(session, team_name) is not None:
                    raise TeamExistsError(team_name)
                await team_queries.insert_team(session, team_name)
                for member in members:
                    await team_queries.upsert_user(
                        session, member.user_id, member.username, member.is_active
                    )
                    await team_queries.set_membership(session, member.user_id, team_name)
        except StorageError as exc:
            # Lost a race with a concurrent insert of the same name
            if isinstance(exc.__cause__, IntegrityError):
                raise TeamExistsError(team_name) from exc.__cause__
            raise

    async def get_team(self, team_name: str) -> Team:
        async with self._transaction("get_team") as session:
            team = await team_queries.get_team(session, team_name)
            if team is None:
                raise NotFoundError("team", team_name)
            members = await team_queries.list_team_members(session, team_name)
            return Team(team_name=team.team_name, members=tuple(to_user(m) for m in members))


class SqlUserRepository(_SqlRepository):
    """UserRepository backed by SQLAlchemy."""

    async def get_user(self, user_id: str) -> User:
        async with self._transaction("get_user") as session:
            row = await user_queries.get_user(session, user_id)
            if row is None:
                raise NotFoundError("user", user_id)
            return to_user(row)

    async def set_is_active(self, user_id: str, is_active: bool) -> tuple[User, str]:
        async with self._transaction("set_is_active") as session:
            row = await user_queries.set_user_active(session, user_id, is_active)
            if row is None:
                raise NotFoundError("user", user_id)
            team_name = await user_queries.get_team_name(session, user_id)
            return to_user(row), team_name or ""

    async def get_team_name(self, user_id: str) -> str:
        async with self._transaction("get_team_name") as session:
            team_name = await user_queries.get_team_name(session, user_id)
            if team_name is None:
                raise NotFoundError("team membership", user_id)
            return team_name


class SqlPullRequestRepository(_SqlRepository):
    """PullRequestRepository backed by SQLAlchemy."""

    async def create_pull_request(self, pull_request: PullRequest) -> None:
        try:
            async with self._transaction("create_pull_request") as session:
                existing = await pr_queries.get_pull_request(
                    session, pull_request.pull_request_id
                )
                if existing is not None:
                    raise PullRequestExistsError(pull_request.pull_request_id)
                await pr_queries.insert_pull_request(session, pull_request)
        except StorageError as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise PullRequestExistsError(pull_request.pull_request_id) from exc.__cause__
            raise

    async def get_pull_request(self, pull_request_id: str) -> PullRequest:
        async with self._transaction("get_pull_request") as session:
            row = await pr_queries.get_pull_request(session, pull_request_id)
            if row is None:
                raise NotFoundError("pull_request", pull_request_id)
            return to_pull_request(row)

    async def merge_pull_request(self, pull_request_id: str) -> PullRequest:
        async with self._transaction("merge_pull_request") as session:
            row = await pr_queries.mark_merged(session, pull_request_id)
            if row is None:
                raise NotFoundError("pull_request", pull_request_id)
            return to_pull_request(row)

    async def list_by_reviewer(self, user_id: str) -> list[PullRequest]:
        async with self._transaction("list_by_reviewer") as session:
            rows = await pr_queries.list_pull_requests_by_reviewer(session, user_id)
            return [to_pull_request(row) for row in rows]

    async def replace_reviewer(
        self, pull_request_id: str, old_user_id: str, new_user_id: str
    ) -> None:
        async with self._transaction("replace_reviewer") as session:
            updated = await pr_queries.replace_reviewer(
                session, pull_request_id, old_user_id, new_user_id
            )
            if updated == 0:
                raise NotFoundError("reviewer assignment", f"{pull_request_id}/{old_user_id}")

    async def active_team_members(self, team_name: str) -> list[User]:
        async with self._transaction("active_team_members") as session:
            rows = await team_queries.list_team_members(session, team_name, active_only=True)
            return [to_user(row) for row in rows]
