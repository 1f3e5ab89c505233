"""Base model class for SQLAlchemy ORM."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    type_annotation_map = {
        UUID: Uuid(as_uuid=True),
        datetime: DateTime(timezone=False),
    }


def new_id() -> UUID:
    """Primary key factory. Keys are generated client-side so they exist after flush."""
    return uuid4()


class TimestampMixin:
    """Mixin for models with created_at timestamp.

    Timestamps are naive local time; pay periods are computed in local time.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        nullable=False,
    )


class UpdatedAtMixin(TimestampMixin):
    """Mixin adding updated_at to created_at."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
        nullable=False,
    )
