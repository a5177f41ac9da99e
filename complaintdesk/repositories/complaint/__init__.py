"""
Complaint repositories package.

Repositories:
    - ComplaintRepository: Complaint rows, scoped search and statistics
    - ComplaintHistoryRepository: Append-only field transition ledger
    - ComplaintNoteRepository: Staff notes
    - ComplaintMessageRepository: Owner/staff message thread

Example:
    from complaintdesk.repositories.complaint import ComplaintRepository

    repo = ComplaintRepository(session)
    complaints, total = repo.search_complaints(owner_id=user_id)
"""

from complaintdesk.repositories.complaint.complaint_history_repository import (
    ComplaintHistoryRepository,
)
from complaintdesk.repositories.complaint.complaint_message_repository import (
    ComplaintMessageRepository,
)
from complaintdesk.repositories.complaint.complaint_note_repository import (
    ComplaintNoteRepository,
)
from complaintdesk.repositories.complaint.complaint_repository import ComplaintRepository

__all__ = [
    "ComplaintRepository",
    "ComplaintHistoryRepository",
    "ComplaintNoteRepository",
    "ComplaintMessageRepository",
]
