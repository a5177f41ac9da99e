"""
Core complaint request schemas.

Content rules (non-empty text, attachment limits) are enforced by the
complaint service so that they apply to every caller; these schemas only
shape and trim the input.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from complaintdesk.models.base.enums import ComplaintStatus, Priority
from complaintdesk.schemas.common.base import BaseCreateSchema, BaseUpdateSchema

__all__ = [
    "ComplaintCreate",
    "ComplaintStatusUpdate",
    "ComplaintPriorityUpdate",
    "ComplaintAssign",
    "ComplaintDeadlineUpdate",
]


class ComplaintCreate(BaseCreateSchema):
    """
    Schema for filing a complaint.

    ``idempotency_key`` lets a client retry a create safely: a repeat with
    the same key returns the complaint created the first time.
    """

    title: str = Field(..., max_length=255, description="Brief complaint title")
    description: str = Field(..., description="Detailed complaint description")
    priority: Priority = Field(default=Priority.MEDIUM)
    category_id: Optional[str] = Field(default=None)
    attachments: List[str] = Field(
        default_factory=list,
        description="Attachment URLs in upload order",
    )
    idempotency_key: Optional[str] = Field(default=None, max_length=100)

    @field_validator("category_id", "idempotency_key", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("attachments")
    @classmethod
    def strip_attachments(cls, v: List[str]) -> List[str]:
        return [url.strip() for url in v if url and url.strip()]


class ComplaintStatusUpdate(BaseUpdateSchema):
    status: ComplaintStatus


class ComplaintPriorityUpdate(BaseUpdateSchema):
    priority: Priority


class ComplaintAssign(BaseUpdateSchema):
    """Assign a complaint to a staff member, optionally with a note."""

    admin_id: str = Field(..., min_length=1)
    note: Optional[str] = Field(default=None)


class ComplaintDeadlineUpdate(BaseUpdateSchema):
    """Set a resolution deadline; the deadline must lie in the future."""

    deadline: datetime
    note: Optional[str] = Field(default=None)
