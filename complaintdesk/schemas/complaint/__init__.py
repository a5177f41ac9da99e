"""
Complaint schemas package.
"""

from complaintdesk.schemas.complaint.complaint_analytics import ComplaintOverview, DailyCount
from complaintdesk.schemas.complaint.complaint_base import (
    ComplaintAssign,
    ComplaintCreate,
    ComplaintDeadlineUpdate,
    ComplaintPriorityUpdate,
    ComplaintStatusUpdate,
)
from complaintdesk.schemas.complaint.complaint_comments import (
    MessageCreate,
    MessageResponse,
    NoteCreate,
)
from complaintdesk.schemas.complaint.complaint_filters import ComplaintFilterParams
from complaintdesk.schemas.complaint.complaint_notifications import NotificationItem
from complaintdesk.schemas.complaint.complaint_response import AssignableAdmin, ComplaintDetail
from complaintdesk.schemas.complaint.complaint_timeline import (
    ActivityItem,
    HistoryEntryResponse,
    NoteResponse,
    RejectionBanner,
    StageEntry,
    StageState,
    StageTimeline,
)

__all__ = [
    "ComplaintCreate",
    "ComplaintStatusUpdate",
    "ComplaintPriorityUpdate",
    "ComplaintAssign",
    "ComplaintDeadlineUpdate",
    "ComplaintFilterParams",
    "ComplaintDetail",
    "AssignableAdmin",
    "HistoryEntryResponse",
    "NoteResponse",
    "ActivityItem",
    "StageState",
    "StageEntry",
    "RejectionBanner",
    "StageTimeline",
    "NoteCreate",
    "MessageCreate",
    "MessageResponse",
    "NotificationItem",
    "DailyCount",
    "ComplaintOverview",
]
