"""
Complaint history model: the system-recorded half of the ledger.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from complaintdesk.models.base.base_model import BaseModel
from complaintdesk.models.base.enums import ChangeType
from complaintdesk.models.base.mixins import CreatedAtMixin
from complaintdesk.models.base.types import enum_values

if TYPE_CHECKING:
    from complaintdesk.models.complaint.complaint import Complaint
    from complaintdesk.models.user.user import User

__all__ = ["ComplaintHistory"]


class ComplaintHistory(BaseModel, CreatedAtMixin):
    """
    Append-only record of one accepted field transition.

    Attributes:
        complaint_id: Complaint the change applies to
        change_type: created / status_change / priority_change
        old_value: Value before the change (null for created)
        new_value: Value after the change
        changed_by: Principal that made the change
    """

    __tablename__ = "complaint_history"
    __table_args__ = (
        Index("ix_complaint_history_complaint_created", "complaint_id", "created_at"),
    )

    complaint_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("complaints.id", ondelete="CASCADE"),
        nullable=False,
        comment="Complaint the change applies to",
    )

    change_type: Mapped[ChangeType] = mapped_column(
        Enum(ChangeType, name="change_type_enum", values_callable=enum_values),
        nullable=False,
        comment="Kind of change",
    )

    old_value: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    new_value: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    changed_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        comment="Principal that made the change",
    )

    complaint: Mapped["Complaint"] = relationship("Complaint", back_populates="history")
    actor: Mapped["User"] = relationship("User", lazy="joined")

    def __repr__(self) -> str:
        return (
            f"<ComplaintHistory(complaint_id={self.complaint_id}, "
            f"type={self.change_type.value}, {self.old_value}->{self.new_value})>"
        )
