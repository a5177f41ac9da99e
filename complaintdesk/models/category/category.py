"""
Complaint category model.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from complaintdesk.models.base.base_model import BaseModel
from complaintdesk.models.base.mixins import CreatedAtMixin

__all__ = ["Category"]


class Category(BaseModel, CreatedAtMixin):
    """
    Complaint category.

    Complaints reference categories through a nullable foreign key, so
    deleting a category leaves its complaints uncategorized.
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="Unique category name",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"
