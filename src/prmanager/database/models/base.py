"""SQLAlchemy declarative base and common column mixins for PR Manager.

All tables inherit from Base and include TimestampMixin for consistent
created_at / updated_at handling. Primary keys are natural string keys
(team name, user id, pull request id) assigned by callers, so the mixin
carries no id column.

Example:
    >>> class MyModel(TimestampMixin, Base):
    ...     __tablename__ = "my_table"
    ...     name: Mapped[str] = mapped_column(Text, primary_key=True)
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Timezone-aware current time used as a client-side column default."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """SQLAlchemy 2.0 declarative base for all PR Manager models."""

    pass


class TimestampMixin:
    """Mixin providing created_at and updated_at columns.

    Timestamps are set client-side with microsecond precision so rows
    created within the same second keep their insertion order; the server
    default covers rows written outside the ORM.

    Attributes:
        created_at: Timestamp set on row creation.
        updated_at: Timestamp set on row creation and on each modification.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )
