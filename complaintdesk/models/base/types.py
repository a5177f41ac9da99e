"""
Custom SQLAlchemy types.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, TypeDecorator

from complaintdesk.core.utils import ensure_utc


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime column.

    Values are stored in UTC and always come back timezone-aware, also on
    backends such as SQLite that drop the offset.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        return ensure_utc(value)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        return ensure_utc(value)


def enum_values(enum_cls) -> list:
    """Persist enum members by value rather than by name."""
    return [member.value for member in enum_cls]
