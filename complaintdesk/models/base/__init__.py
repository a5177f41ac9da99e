"""
Base model package.
"""

from complaintdesk.models.base.base_model import Base, BaseModel
from complaintdesk.models.base.enums import (
    GLOBAL_ADMIN_ROLES,
    STAFF_ROLES,
    ChangeType,
    ComplaintStatus,
    Priority,
    UserRole,
)
from complaintdesk.models.base.mixins import CreatedAtMixin, TimestampMixin
from complaintdesk.models.base.types import UTCDateTime

__all__ = [
    "Base",
    "BaseModel",
    "CreatedAtMixin",
    "TimestampMixin",
    "UTCDateTime",
    "ChangeType",
    "ComplaintStatus",
    "Priority",
    "UserRole",
    "STAFF_ROLES",
    "GLOBAL_ADMIN_ROLES",
]
