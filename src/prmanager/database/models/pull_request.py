"""Pull request and reviewer assignment models for PR Manager.

Status is stored as an integer code (1 = OPEN, 2 = MERGED), see
prmanager.domain.PullRequestStatus. Reviewers occupy numbered slots;
a user can hold at most one slot per pull request.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prmanager.database.models.base import Base, TimestampMixin
from prmanager.domain import MAX_REVIEWERS, PullRequestStatus


class PullRequestRow(TimestampMixin, Base):
    """A pull request.

    Attributes:
        pull_request_id: Caller-assigned identifier (primary key).
        pull_request_name: Title of the pull request.
        author_id: Foreign key to the authoring user.
        status_id: Stored status code.
        merged_at: Set once, on the first merge.
        assignments: Reviewer slots ordered by slot number.
    """

    __tablename__ = "pull_requests"

    pull_request_id: Mapped[str] = mapped_column(Text, primary_key=True)
    pull_request_name: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id"),
        nullable=False,
    )
    status_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=int(PullRequestStatus.OPEN),
        server_default=str(int(PullRequestStatus.OPEN)),
    )
    merged_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    assignments: Mapped[list["ReviewerAssignmentRow"]] = relationship(
        "ReviewerAssignmentRow",
        back_populates="pull_request",
        order_by="ReviewerAssignmentRow.slot",
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class ReviewerAssignmentRow(TimestampMixin, Base):
    """A user occupying one reviewer slot of a pull request.

    Attributes:
        pull_request_id: Owning pull request.
        slot: Slot number, 1-based.
        user_id: Reviewer occupying the slot.
    """

    __tablename__ = "reviewer_assignments"
    __table_args__ = (
        UniqueConstraint("pull_request_id", "user_id", name="uq_reviewer_assignments_pr_user"),
        CheckConstraint(f"slot BETWEEN 1 AND {MAX_REVIEWERS}", name="ck_reviewer_assignments_slot"),
    )

    pull_request_id: Mapped[str] = mapped_column(
        ForeignKey("pull_requests.pull_request_id"),
        primary_key=True,
    )
    slot: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id"),
        nullable=False,
        index=True,
    )

    pull_request: Mapped[PullRequestRow] = relationship(
        "PullRequestRow",
        back_populates="assignments",
    )
