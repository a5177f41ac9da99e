"""
Complaint analytics overview.
"""

from datetime import date
from typing import Dict, List, Optional

from pydantic import Field

from complaintdesk.schemas.common.base import BaseSchema

__all__ = ["DailyCount", "ComplaintOverview"]


class DailyCount(BaseSchema):
    day: date
    count: int = Field(..., ge=0)


class ComplaintOverview(BaseSchema):
    """Counts over the complaints visible to the caller."""

    total: int = Field(..., ge=0)
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_priority: Dict[str, int] = Field(default_factory=dict)
    by_category: Dict[str, int] = Field(default_factory=dict)
    last_7_days: List[DailyCount] = Field(default_factory=list)
    average_resolution_days: Optional[float] = Field(
        default=None,
        description="Mean days from creation to resolution over resolved/closed complaints",
    )
