"""
Complaint response schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from complaintdesk.models.base.enums import ComplaintStatus, Priority, UserRole
from complaintdesk.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = [
    "ComplaintDetail",
    "AssignableAdmin",
]


class ComplaintDetail(BaseResponseSchema):
    """Projection of a complaint row with display names resolved."""

    user_id: str
    owner_name: Optional[str] = None
    title: str
    description: str
    priority: Priority
    status: ComplaintStatus
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    assigned_to: Optional[str] = None
    assignee_name: Optional[str] = None
    attachments: List[str] = Field(default_factory=list)
    deadline: Optional[datetime] = None
    deadline_note: Optional[str] = None
    updated_at: datetime

    @classmethod
    def from_model(cls, complaint) -> "ComplaintDetail":
        return cls(
            id=complaint.id,
            created_at=complaint.created_at,
            updated_at=complaint.updated_at,
            user_id=complaint.user_id,
            owner_name=complaint.owner.name if complaint.owner else None,
            title=complaint.title,
            description=complaint.description,
            priority=complaint.priority,
            status=complaint.status,
            category_id=complaint.category_id,
            category_name=complaint.category.name if complaint.category else None,
            assigned_to=complaint.assigned_to,
            assignee_name=complaint.assignee.name if complaint.assignee else None,
            attachments=list(complaint.attachments or []),
            deadline=complaint.deadline,
            deadline_note=complaint.deadline_note,
        )


class AssignableAdmin(BaseSchema):
    """Staff member eligible to take a complaint."""

    id: str
    name: str
    email: str
    role: UserRole
