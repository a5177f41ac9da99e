# --- File: complaint_repository.py ---
"""
Core complaint repository with scoped querying and aggregation.

Visibility is expressed as a scope: an owner id restricts the query to
one student's complaints, a category id set restricts it to the
categories a category admin manages, and neither means unrestricted.
Complaints without a category never match a category scope.
"""

from datetime import datetime
from typing import Any, Collection, Dict, List, Optional, Tuple

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaintdesk.core.exceptions import RepositoryError
from complaintdesk.models.base.enums import ComplaintStatus, Priority
from complaintdesk.models.complaint.complaint import Complaint
from complaintdesk.repositories.base.base_repository import BaseRepository


class ComplaintRepository(BaseRepository[Complaint]):
    """
    Core complaint repository.

    Provides scoped search, idempotent-create lookups and the grouped
    counts used by analytics.
    """

    def __init__(self, session: Session):
        super().__init__(Complaint, session)

    # ==================== Lookups ====================

    def find_by_idempotency_key(self, user_id: str, key: str) -> Optional[Complaint]:
        """Find a complaint previously created by ``user_id`` with ``key``."""
        return self.find_one_by_criteria({"user_id": user_id, "idempotency_key": key})

    def find_by_owner(self, user_id: str) -> List[Complaint]:
        """All complaints filed by a student, newest first."""
        return self.find_by_criteria({"user_id": user_id}, order_by=["-created_at"])

    # ==================== Search ====================

    def _apply_scope(
        self,
        query,
        owner_id: Optional[str] = None,
        category_ids: Optional[Collection[str]] = None,
    ):
        if owner_id is not None:
            query = query.where(Complaint.user_id == owner_id)
        if category_ids is not None:
            query = query.where(Complaint.category_id.in_(list(category_ids)))
        return query

    def search_complaints(
        self,
        owner_id: Optional[str] = None,
        category_ids: Optional[Collection[str]] = None,
        search_term: Optional[str] = None,
        category_id: Optional[str] = None,
        priority: Optional[Priority] = None,
        status: Optional[ComplaintStatus] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Complaint], int]:
        """
        Scoped complaint search.

        Args:
            owner_id: Restrict to one owner's complaints
            category_ids: Restrict to these categories (None = unrestricted)
            search_term: Case-insensitive substring of the title
            category_id: Filter by category
            priority: Filter by priority
            status: Filter by status
            skip: Number of records to skip
            limit: Maximum records to return

        Returns:
            Tuple of (complaints newest first, total count)
        """
        try:
            query = self._apply_scope(select(Complaint), owner_id, category_ids)

            if search_term:
                query = query.where(Complaint.title.ilike(f"%{search_term}%"))

            if category_id:
                query = query.where(Complaint.category_id == category_id)

            if priority:
                query = query.where(Complaint.priority == priority)

            if status:
                query = query.where(Complaint.status == status)

            count_query = select(func.count()).select_from(query.subquery())
            total_count = self.db.execute(count_query).scalar_one()

            query = query.order_by(desc(Complaint.created_at), desc(Complaint.id))
            query = query.offset(skip).limit(limit)

            complaints = list(self.db.execute(query).unique().scalars().all())
            return complaints, total_count

        except SQLAlchemyError as e:
            raise RepositoryError(f"Complaint search failed: {str(e)}") from e

    def find_in_scope(
        self,
        owner_id: Optional[str] = None,
        category_ids: Optional[Collection[str]] = None,
        created_from: Optional[datetime] = None,
    ) -> List[Complaint]:
        """Every complaint visible in a scope, optionally created after a point in time."""
        try:
            query = self._apply_scope(select(Complaint), owner_id, category_ids)
            if created_from is not None:
                query = query.where(Complaint.created_at >= created_from)
            query = query.order_by(Complaint.created_at)
            return list(self.db.execute(query).unique().scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Scoped complaint lookup failed: {str(e)}") from e

    # ==================== Analytics ====================

    def get_complaint_statistics(
        self,
        owner_id: Optional[str] = None,
        category_ids: Optional[Collection[str]] = None,
    ) -> Dict[str, Any]:
        """
        Grouped counts over the complaints in scope.

        Returns:
            Dictionary with total, status, priority and category breakdowns
            (category keyed by id, None for uncategorized)
        """
        try:
            def grouped(column) -> Dict[Any, int]:
                query = select(column, func.count(Complaint.id).label("count"))
                query = self._apply_scope(query, owner_id, category_ids).group_by(column)
                return {row[0]: row.count for row in self.db.execute(query)}

            status_breakdown = {
                status.value: count for status, count in grouped(Complaint.status).items()
            }
            priority_breakdown = {
                priority.value: count for priority, count in grouped(Complaint.priority).items()
            }
            category_breakdown = grouped(Complaint.category_id)

            return {
                "total_complaints": sum(status_breakdown.values()),
                "status_breakdown": status_breakdown,
                "priority_breakdown": priority_breakdown,
                "category_breakdown": category_breakdown,
            }
        except SQLAlchemyError as e:
            raise RepositoryError(f"Complaint statistics failed: {str(e)}") from e

    # ==================== Bulk Operations ====================

    def clear_category(self, category_id: str) -> int:
        """
        Detach complaints from a category that is being deleted.

        Returns:
            Number of complaints updated
        """
        try:
            result = self.db.execute(
                update(Complaint)
                .where(Complaint.category_id == category_id)
                .values(category_id=None)
                .execution_options(synchronize_session="fetch")
            )
            self.db.flush()
            return result.rowcount or 0
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Clearing category failed: {str(e)}") from e
