"""
Category management.

Categories are readable by everyone and managed by admins. Deleting a
category leaves its complaints uncategorized and removes the category
from every admin's scope.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from complaintdesk.core.events import ChangeEvent, ChangeNotifier
from complaintdesk.core.exceptions import DuplicateEntryError, ResourceNotFoundError, ValidationError
from complaintdesk.models.base.enums import GLOBAL_ADMIN_ROLES
from complaintdesk.models.category import Category
from complaintdesk.repositories.category import (
    AdminCategoryAssignmentRepository,
    CategoryRepository,
)
from complaintdesk.repositories.complaint import ComplaintRepository
from complaintdesk.schemas.category import CategoryResponse
from complaintdesk.services.base import BaseService, ServiceResult
from complaintdesk.services.common.permissions import Principal, require_role


class CategoryService(BaseService[Category, CategoryRepository]):

    def __init__(self, db_session: Session, notifier: Optional[ChangeNotifier] = None):
        super().__init__(CategoryRepository(db_session), db_session, notifier)
        self.complaints = ComplaintRepository(db_session)
        self.assignments = AdminCategoryAssignmentRepository(db_session)

    def _clean_name(self, name: Optional[str], exclude_id: Optional[str] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required", field="name")
        existing = self.repository.find_by_name(name)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateEntryError(f"Category '{name}' already exists")
        return name

    def _load(self, category_id: str) -> Category:
        category = self.repository.find_by_id(category_id)
        if category is None:
            raise ResourceNotFoundError("Category", category_id)
        return category

    def list_categories(self) -> ServiceResult[List[CategoryResponse]]:
        """All categories ordered by name."""
        try:
            categories = self.repository.list_ordered()
            return ServiceResult.success([CategoryResponse.model_validate(c) for c in categories])
        except Exception as e:
            return self._handle_exception(e, "list categories")

    def create(self, principal: Principal, name: str) -> ServiceResult[CategoryResponse]:
        try:
            require_role(principal, GLOBAL_ADMIN_ROLES)
            category = Category(name=self._clean_name(name))
            with self.transaction():
                self.repository.create(category)

            self._log_operation("Category created", category.id, {"category_name": category.name})
            return ServiceResult.success(CategoryResponse.model_validate(category), message="Category created")
        except Exception as e:
            return self._handle_exception(e, "create category", name)

    def rename(self, principal: Principal, category_id: str, name: str) -> ServiceResult[CategoryResponse]:
        try:
            require_role(principal, GLOBAL_ADMIN_ROLES)
            category = self._load(category_id)
            new_name = self._clean_name(name, exclude_id=category.id)
            with self.transaction():
                self.repository.update(category, {"name": new_name})

            self._log_operation("Category renamed", category.id, {"category_name": new_name})
            return ServiceResult.success(CategoryResponse.model_validate(category), message="Category updated")
        except Exception as e:
            return self._handle_exception(e, "rename category", category_id)

    def delete(self, principal: Principal, category_id: str) -> ServiceResult[int]:
        """
        Delete a category.

        Returns:
            Number of complaints left uncategorized
        """
        try:
            require_role(principal, GLOBAL_ADMIN_ROLES)
            category = self._load(category_id)

            affected = self.complaints.find_by_criteria({"category_id": category.id})
            events = [ChangeEvent.for_complaint("complaints", "update", c) for c in affected]

            with self.transaction():
                detached = self.complaints.clear_category(category.id)
                self.assignments.delete_for_category(category.id)
                self.repository.delete(category)
            for complaint in affected:
                self.db.expire(complaint)

            self._log_operation("Category deleted", category_id, {"complaints_detached": detached})
            self._publish(events)
            return ServiceResult.success(detached, message="Category deleted")
        except Exception as e:
            return self._handle_exception(e, "delete category", category_id)
