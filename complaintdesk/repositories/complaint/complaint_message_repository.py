"""
Complaint message repository.
"""

from typing import List

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaintdesk.core.exceptions import RepositoryError
from complaintdesk.models.complaint.complaint_message import ComplaintMessage
from complaintdesk.repositories.base.base_repository import BaseRepository


class ComplaintMessageRepository(BaseRepository[ComplaintMessage]):

    def __init__(self, session: Session):
        super().__init__(ComplaintMessage, session)

    def find_by_complaint(self, complaint_id: str) -> List[ComplaintMessage]:
        """Thread for one complaint, oldest first."""
        return self.find_by_criteria(
            {"complaint_id": complaint_id},
            order_by=["created_at"],
        )

    def count_by_complaint(self, complaint_id: str) -> int:
        try:
            query = select(func.count(ComplaintMessage.id)).where(
                ComplaintMessage.complaint_id == complaint_id
            )
            return self.db.execute(query).scalar_one()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Message count failed: {str(e)}") from e
