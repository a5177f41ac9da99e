"""
Complaint history repository: the append-only half of the ledger.
"""

from typing import List

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaintdesk.core.exceptions import RepositoryError
from complaintdesk.models.complaint.complaint import Complaint
from complaintdesk.models.complaint.complaint_history import ComplaintHistory
from complaintdesk.repositories.base.base_repository import BaseRepository


class ComplaintHistoryRepository(BaseRepository[ComplaintHistory]):
    """History entries are only ever appended; there is no update path."""

    def __init__(self, session: Session):
        super().__init__(ComplaintHistory, session)

    def find_by_complaint(self, complaint_id: str) -> List[ComplaintHistory]:
        """History of one complaint in chronological order."""
        return self.find_by_criteria(
            {"complaint_id": complaint_id},
            order_by=["created_at"],
        )

    def find_for_owner(self, owner_id: str, limit: int = 50) -> List[ComplaintHistory]:
        """
        Most recent history entries across every complaint of one owner.

        Args:
            owner_id: Complaint owner
            limit: Maximum entries to return

        Returns:
            Entries newest first
        """
        try:
            query = (
                select(ComplaintHistory)
                .join(Complaint, ComplaintHistory.complaint_id == Complaint.id)
                .where(Complaint.user_id == owner_id)
                .order_by(desc(ComplaintHistory.created_at))
                .limit(limit)
            )
            return list(self.db.execute(query).unique().scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Owner history lookup failed: {str(e)}") from e
