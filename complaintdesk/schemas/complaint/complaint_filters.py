"""
Complaint list filters.
"""

from typing import Optional

from pydantic import Field, field_validator

from complaintdesk.models.base.enums import ComplaintStatus, Priority
from complaintdesk.schemas.common.pagination import PaginationParams

__all__ = ["ComplaintFilterParams"]


class ComplaintFilterParams(PaginationParams):
    """Search and filter parameters for complaint listings."""

    search: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Case-insensitive match on the title",
    )
    category_id: Optional[str] = Field(default=None)
    priority: Optional[Priority] = Field(default=None)
    status: Optional[ComplaintStatus] = Field(default=None)

    @field_validator("search", "category_id", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v
