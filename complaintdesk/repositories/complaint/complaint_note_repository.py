"""
Complaint note repository.
"""

from typing import List

from sqlalchemy.orm import Session

from complaintdesk.models.complaint.complaint_note import ComplaintNote
from complaintdesk.repositories.base.base_repository import BaseRepository


class ComplaintNoteRepository(BaseRepository[ComplaintNote]):

    def __init__(self, session: Session):
        super().__init__(ComplaintNote, session)

    def find_by_complaint(self, complaint_id: str) -> List[ComplaintNote]:
        """Notes on one complaint in chronological order."""
        return self.find_by_criteria(
            {"complaint_id": complaint_id},
            order_by=["created_at"],
        )
