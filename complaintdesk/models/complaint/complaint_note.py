"""
Complaint note model: free-text staff annotations in the ledger.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from complaintdesk.models.base.base_model import BaseModel
from complaintdesk.models.base.mixins import TimestampMixin

if TYPE_CHECKING:
    from complaintdesk.models.complaint.complaint import Complaint
    from complaintdesk.models.user.user import User

__all__ = ["ComplaintNote"]


class ComplaintNote(BaseModel, TimestampMixin):
    """Staff annotation; only its author may delete it."""

    __tablename__ = "complaint_notes"
    __table_args__ = (
        Index("ix_complaint_notes_complaint_created", "complaint_id", "created_at"),
    )

    complaint_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("complaints.id", ondelete="CASCADE"),
        nullable=False,
    )

    admin_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Author of the note",
    )

    note: Mapped[str] = mapped_column(Text, nullable=False)

    complaint: Mapped["Complaint"] = relationship("Complaint", back_populates="notes")
    author: Mapped["User"] = relationship("User", lazy="joined")
