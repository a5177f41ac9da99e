"""
Admin category assignment repository.

Assignments are the category scope of a category admin.
"""

from typing import Iterable, List, Optional, Set

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaintdesk.core.exceptions import RepositoryError
from complaintdesk.models.category.admin_category_assignment import AdminCategoryAssignment
from complaintdesk.repositories.base.base_repository import BaseRepository


class AdminCategoryAssignmentRepository(BaseRepository[AdminCategoryAssignment]):

    def __init__(self, session: Session):
        super().__init__(AdminCategoryAssignment, session)

    def find_by_admin(self, admin_id: str) -> List[AdminCategoryAssignment]:
        return self.find_by_criteria({"admin_id": admin_id})

    def category_ids_for(self, admin_id: str) -> Set[str]:
        """Category scope of one admin."""
        try:
            query = select(AdminCategoryAssignment.category_id).where(
                AdminCategoryAssignment.admin_id == admin_id
            )
            return set(self.db.execute(query).scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Scope lookup failed: {str(e)}") from e

    def admin_ids_for_category(self, category_id: str) -> Set[str]:
        """Admins whose scope contains ``category_id``."""
        try:
            query = select(AdminCategoryAssignment.admin_id).where(
                AdminCategoryAssignment.category_id == category_id
            )
            return set(self.db.execute(query).scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Scope lookup failed: {str(e)}") from e

    def assign(
        self,
        admin_id: str,
        category_ids: Iterable[str],
        assigned_by: Optional[str] = None,
    ) -> List[AdminCategoryAssignment]:
        """Insert one assignment per category."""
        rows = [
            AdminCategoryAssignment(
                admin_id=admin_id,
                category_id=category_id,
                assigned_by=assigned_by,
            )
            for category_id in dict.fromkeys(category_ids)
        ]
        return self.create_many(rows)

    def _delete_where(self, *conditions) -> int:
        try:
            result = self.db.execute(
                delete(AdminCategoryAssignment)
                .where(*conditions)
                .execution_options(synchronize_session="fetch")
            )
            self.db.flush()
            return result.rowcount or 0
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Assignment delete failed: {str(e)}") from e

    def delete_for_admin(self, admin_id: str) -> int:
        """Remove an admin's whole scope."""
        return self._delete_where(AdminCategoryAssignment.admin_id == admin_id)

    def delete_for_category(self, category_id: str) -> int:
        """Remove every assignment pointing at a category."""
        return self._delete_where(AdminCategoryAssignment.category_id == category_id)
