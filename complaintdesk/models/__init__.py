"""
ORM models. Importing this package registers every table on Base.metadata.
"""

from complaintdesk.models.base import Base, BaseModel
from complaintdesk.models.category import AdminCategoryAssignment, Category
from complaintdesk.models.complaint import (
    Complaint,
    ComplaintHistory,
    ComplaintMessage,
    ComplaintNote,
)
from complaintdesk.models.user import User, UserRole

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "UserRole",
    "Category",
    "AdminCategoryAssignment",
    "Complaint",
    "ComplaintHistory",
    "ComplaintNote",
    "ComplaintMessage",
]
