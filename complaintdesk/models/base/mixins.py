"""
SQLAlchemy model mixins for reusable functionality.
"""

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from complaintdesk.core.utils import utcnow
from complaintdesk.models.base.types import UTCDateTime


class CreatedAtMixin:
    """Creation timestamp for append-only records."""

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        index=True,
        comment="Record creation timestamp (UTC)",
    )


class TimestampMixin(CreatedAtMixin):
    """
    Mixin for automatic timestamp tracking.

    Provides created_at and updated_at; updated_at is refreshed on every
    ORM update.
    """

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        comment="Record last update timestamp (UTC)",
    )
