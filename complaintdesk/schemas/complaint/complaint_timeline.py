"""
Activity ledger views.

Two derived views exist over the same ledger: a flat activity feed of
history entries and notes, and a stage view keyed by lifecycle stage.
"""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import Field

from complaintdesk.models.base.enums import ChangeType, ComplaintStatus
from complaintdesk.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = [
    "HistoryEntryResponse",
    "NoteResponse",
    "ActivityItem",
    "StageState",
    "StageEntry",
    "RejectionBanner",
    "StageTimeline",
]


class HistoryEntryResponse(BaseResponseSchema):
    complaint_id: str
    change_type: ChangeType
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    changed_by: str
    actor_name: Optional[str] = None

    @classmethod
    def from_model(cls, entry) -> "HistoryEntryResponse":
        return cls(
            id=entry.id,
            created_at=entry.created_at,
            complaint_id=entry.complaint_id,
            change_type=entry.change_type,
            old_value=entry.old_value,
            new_value=entry.new_value,
            changed_by=entry.changed_by,
            actor_name=entry.actor.name if entry.actor else None,
        )


class NoteResponse(BaseResponseSchema):
    complaint_id: str
    admin_id: str
    author_name: Optional[str] = None
    note: str

    @classmethod
    def from_model(cls, note) -> "NoteResponse":
        return cls(
            id=note.id,
            created_at=note.created_at,
            complaint_id=note.complaint_id,
            admin_id=note.admin_id,
            author_name=note.author.name if note.author else None,
            note=note.note,
        )


class ActivityItem(BaseSchema):
    """One row of the flat activity feed."""

    kind: Literal["history", "note"]
    created_at: datetime
    history: Optional[HistoryEntryResponse] = None
    note: Optional[NoteResponse] = None


class StageState(str, Enum):
    COMPLETED = "completed"
    ACTIVE = "active"
    PENDING = "pending"


class StageEntry(BaseSchema):
    """One lifecycle stage in the stage view."""

    stage: ComplaintStatus
    state: StageState
    reached: bool = False
    entered_at: Optional[datetime] = None
    entered_by: Optional[str] = None
    notes: List[NoteResponse] = Field(default_factory=list)


class RejectionBanner(BaseSchema):
    """Rejection is a side state, shown apart from the stage sequence."""

    rejected_at: datetime
    rejected_by: Optional[str] = None
    from_status: Optional[ComplaintStatus] = None
    notes: List[NoteResponse] = Field(default_factory=list)


class StageTimeline(BaseSchema):
    complaint_id: str
    current_status: ComplaintStatus
    stages: List[StageEntry]
    rejection: Optional[RejectionBanner] = None
