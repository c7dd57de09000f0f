"""Team, user and membership models for PR Manager.

A team is identified by its name. Users are upserted when a team is
created and linked through the memberships table, whose primary key is
the user id: a user belongs to at most one team at a time.
"""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Text, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prmanager.database.models.base import Base, TimestampMixin


class TeamRow(TimestampMixin, Base):
    """A named team.

    Attributes:
        team_name: Unique, immutable team name (primary key).
        memberships: Membership rows linking users to this team.
    """

    __tablename__ = "teams"

    team_name: Mapped[str] = mapped_column(Text, primary_key=True)

    memberships: Mapped[list["MembershipRow"]] = relationship(
        "MembershipRow",
        back_populates="team",
        lazy="selectin",
    )


class UserRow(TimestampMixin, Base):
    """A user that can author or review pull requests.

    Attributes:
        user_id: Externally assigned identifier (primary key).
        username: Display name.
        is_active: Whether the user can be picked as a reviewer.
    """

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )


class MembershipRow(TimestampMixin, Base):
    """Links a user to their single team.

    Attributes:
        user_id: Member user id (primary key, one team per user).
        team_name: Team the user belongs to.
    """

    __tablename__ = "memberships"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id"),
        primary_key=True,
    )
    team_name: Mapped[str] = mapped_column(
        ForeignKey("teams.team_name"),
        nullable=False,
        index=True,
    )

    team: Mapped[TeamRow] = relationship(
        "TeamRow",
        back_populates="memberships",
    )
    user: Mapped[UserRow] = relationship(
        "UserRow",
        lazy="selectin",
    )
