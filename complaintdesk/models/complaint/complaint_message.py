"""
Complaint message model: the owner/staff conversation thread.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from complaintdesk.models.base.base_model import BaseModel
from complaintdesk.models.base.mixins import CreatedAtMixin

if TYPE_CHECKING:
    from complaintdesk.models.complaint.complaint import Complaint
    from complaintdesk.models.user.user import User

__all__ = ["ComplaintMessage"]


class ComplaintMessage(BaseModel, CreatedAtMixin):
    """
    Append-only message on a complaint.

    ``is_admin`` is a snapshot of the sender's role at send time.
    """

    __tablename__ = "complaint_messages"
    __table_args__ = (
        Index("ix_complaint_messages_complaint_created", "complaint_id", "created_at"),
    )

    complaint_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("complaints.id", ondelete="CASCADE"),
        nullable=False,
    )

    sender_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    message: Mapped[str] = mapped_column(Text, nullable=False)

    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    complaint: Mapped["Complaint"] = relationship("Complaint", back_populates="messages")
    sender: Mapped["User"] = relationship("User", lazy="joined")
