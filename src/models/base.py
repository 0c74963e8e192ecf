"""SQLAlchemy declarative base with common mixins."""
from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class CreatedAtMixin:
    """
    Mixin that adds a created_at column.

    Timezone-aware (TIMESTAMP WITH TIME ZONE) and indexed for newest-first listing.
    clock_timestamp() gives wall-clock time, so rows inserted in one
    transaction still get distinct, ordered timestamps.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.clock_timestamp(),
        nullable=False,
        index=True,
    )
