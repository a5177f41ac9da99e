"""
Category repositories package.
"""

from complaintdesk.repositories.category.admin_category_assignment_repository import (
    AdminCategoryAssignmentRepository,
)
from complaintdesk.repositories.category.category_repository import CategoryRepository

__all__ = ["CategoryRepository", "AdminCategoryAssignmentRepository"]
