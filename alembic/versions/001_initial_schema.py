"""Initial schema for PR Manager.

Creates the core tables: teams, users, memberships, pull_requests and
reviewer_assignments.

Revision ID: 001
Revises: None
Create Date: 2025-11-10
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("team_name", sa.Text(), primary_key=True),
        *_timestamps(),
    )

    op.create_table(
        "users",
        sa.Column("user_id", sa.Text(), primary_key=True),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
    )

    # One row per user: a user belongs to at most one team
    op.create_table(
        "memberships",
        sa.Column("user_id", sa.Text(), sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("team_name", sa.Text(), sa.ForeignKey("teams.team_name"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_memberships_team_name", "memberships", ["team_name"])

    op.create_table(
        "pull_requests",
        sa.Column("pull_request_id", sa.Text(), primary_key=True),
        sa.Column("pull_request_name", sa.Text(), nullable=False),
        sa.Column("author_id", sa.Text(), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("status_id", sa.Integer(), server_default="1", nullable=False),
        sa.Column("merged_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "reviewer_assignments",
        sa.Column(
            "pull_request_id",
            sa.Text(),
            sa.ForeignKey("pull_requests.pull_request_id"),
            primary_key=True,
        ),
        sa.Column("slot", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Text(), sa.ForeignKey("users.user_id"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "pull_request_id", "user_id", name="uq_reviewer_assignments_pr_user"
        ),
        sa.CheckConstraint("slot BETWEEN 1 AND 2", name="ck_reviewer_assignments_slot"),
    )
    op.create_index("ix_reviewer_assignments_user_id", "reviewer_assignments", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_reviewer_assignments_user_id", table_name="reviewer_assignments")
    op.drop_table("reviewer_assignments")
    op.drop_table("pull_requests")
    op.drop_index("ix_memberships_team_name", table_name="memberships")
    op.drop_table("memberships")
    op.drop_table("users")
    op.drop_table("teams")
