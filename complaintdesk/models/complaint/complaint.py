"""
Core complaint model with lifecycle tracking.

Handles complaint content, status, priority, assignment and deadline,
and owns the ledger (history, notes) and message rows by cascade.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, Enum, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from complaintdesk.models.base.base_model import BaseModel
from complaintdesk.models.base.enums import ComplaintStatus, Priority
from complaintdesk.models.base.mixins import TimestampMixin
from complaintdesk.models.base.types import UTCDateTime, enum_values

if TYPE_CHECKING:
    from complaintdesk.models.category.category import Category
    from complaintdesk.models.complaint.complaint_history import ComplaintHistory
    from complaintdesk.models.complaint.complaint_message import ComplaintMessage
    from complaintdesk.models.complaint.complaint_note import ComplaintNote
    from complaintdesk.models.user.user import User

__all__ = ["Complaint"]


class Complaint(BaseModel, TimestampMixin):
    """
    Complaint filed by a student.

    Attributes:
        user_id: Owner; never changes after creation
        title: Brief complaint summary
        description: Detailed complaint description
        priority: low / medium / high
        status: Current lifecycle status
        category_id: Optional category; nulled when the category is deleted
        assigned_to: Staff member currently responsible
        attachments: Ordered list of attachment URLs
        deadline: Optional resolution deadline
        deadline_note: Free text attached to the deadline
        idempotency_key: Client supplied key that dedupes retried creates
    """

    __tablename__ = "complaints"
    __table_args__ = (
        Index("ix_complaints_status_category", "status", "category_id"),
        Index("ix_complaints_assigned_to_status", "assigned_to", "status"),
        UniqueConstraint("user_id", "idempotency_key", name="uq_complaints_owner_idempotency_key"),
        {"comment": "Complaints filed by students"},
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owner of the complaint",
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Brief complaint summary",
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed complaint description",
    )

    priority: Mapped[Priority] = mapped_column(
        Enum(Priority, name="priority_enum", values_callable=enum_values),
        nullable=False,
        default=Priority.MEDIUM,
        index=True,
        comment="Complaint priority level",
    )

    status: Mapped[ComplaintStatus] = mapped_column(
        Enum(ComplaintStatus, name="complaint_status_enum", values_callable=enum_values),
        nullable=False,
        default=ComplaintStatus.PENDING,
        index=True,
        comment="Current complaint status",
    )

    category_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Category; null when uncategorized",
    )

    assigned_to: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        comment="Currently assigned staff member",
    )

    attachments: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Attachment URLs in upload order",
    )

    deadline: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(),
        nullable=True,
        comment="Resolution deadline",
    )

    deadline_note: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Note attached to the deadline",
    )

    idempotency_key: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Client key used to dedupe retried creates",
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", foreign_keys=[user_id], lazy="joined")
    assignee: Mapped[Optional["User"]] = relationship("User", foreign_keys=[assigned_to], lazy="selectin")
    category: Mapped[Optional["Category"]] = relationship("Category", lazy="joined")

    # Child relationships
    history: Mapped[List["ComplaintHistory"]] = relationship(
        "ComplaintHistory",
        back_populates="complaint",
        cascade="all, delete-orphan",
        order_by="ComplaintHistory.created_at.asc()",
    )

    notes: Mapped[List["ComplaintNote"]] = relationship(
        "ComplaintNote",
        back_populates="complaint",
        cascade="all, delete-orphan",
        order_by="ComplaintNote.created_at.asc()",
    )

    messages: Mapped[List["ComplaintMessage"]] = relationship(
        "ComplaintMessage",
        back_populates="complaint",
        cascade="all, delete-orphan",
        order_by="ComplaintMessage.created_at.asc()",
    )

    def __repr__(self) -> str:
        return (
            f"<Complaint(id={self.id}, "
            f"status={self.status.value}, "
            f"priority={self.priority.value})>"
        )
