"""
Student notification feed items.
"""

from datetime import datetime
from typing import Optional

from complaintdesk.models.base.enums import ChangeType
from complaintdesk.schemas.common.base import BaseSchema

__all__ = ["NotificationItem"]


class NotificationItem(BaseSchema):
    """A history entry on one of the caller's complaints, rendered for display."""

    id: str
    complaint_id: str
    complaint_title: str
    change_type: ChangeType
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    message: str
    created_at: datetime
