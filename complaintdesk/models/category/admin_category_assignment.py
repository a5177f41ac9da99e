"""
Category scope assignments for category admins.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from complaintdesk.models.base.base_model import BaseModel
from complaintdesk.models.base.mixins import CreatedAtMixin

if TYPE_CHECKING:
    from complaintdesk.models.category.category import Category

__all__ = ["AdminCategoryAssignment"]


class AdminCategoryAssignment(BaseModel, CreatedAtMixin):
    """
    Join row giving a category admin scope over one category.

    Attributes:
        admin_id: Scoped admin
        category_id: Category in scope
        assigned_by: Principal that granted the scope
    """

    __tablename__ = "admin_category_assignments"
    __table_args__ = (
        UniqueConstraint("admin_id", "category_id", name="uq_admin_category"),
        Index("ix_admin_category_assignments_category", "category_id"),
    )

    admin_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Scoped admin",
    )

    category_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        comment="Category in scope",
    )

    assigned_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        comment="Principal that granted the scope",
    )

    category: Mapped["Category"] = relationship("Category", lazy="joined")

    def __repr__(self) -> str:
        return f"<AdminCategoryAssignment(admin_id={self.admin_id}, category_id={self.category_id})>"
