"""
Staff notes on complaints.

Staff write notes and the complaint owner can read them. Adding a note
requires write scope over the complaint, and only the author may delete it.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from complaintdesk.core.events import ChangeEvent, ChangeNotifier
from complaintdesk.core.exceptions import (
    AuthorizationError,
    ComplaintNotFoundError,
    ResourceNotFoundError,
    ValidationError,
)
from complaintdesk.core.utils import utcnow
from complaintdesk.models.complaint import Complaint, ComplaintNote
from complaintdesk.repositories.complaint import ComplaintNoteRepository, ComplaintRepository
from complaintdesk.schemas.complaint import NoteResponse
from complaintdesk.services.base import BaseService, ServiceResult
from complaintdesk.services.common.permissions import Principal, can_delete_note, require_read, require_write


class NoteService(BaseService[ComplaintNote, ComplaintNoteRepository]):

    def __init__(self, db_session: Session, notifier: Optional[ChangeNotifier] = None):
        super().__init__(ComplaintNoteRepository(db_session), db_session, notifier)
        self.complaints = ComplaintRepository(db_session)

    def _load_complaint(self, complaint_id: str) -> Complaint:
        complaint = self.complaints.find_by_id(complaint_id)
        if complaint is None:
            raise ComplaintNotFoundError(complaint_id)
        return complaint

    def add_note(self, principal: Principal, complaint_id: str, text: str) -> ServiceResult[NoteResponse]:
        """Append a note authored by ``principal``."""
        try:
            complaint = self._load_complaint(complaint_id)
            require_write(principal, complaint)

            text = (text or "").strip()
            if not text:
                raise ValidationError("Note cannot be empty", field="note")

            now = utcnow()
            note = ComplaintNote(
                complaint_id=complaint.id,
                admin_id=principal.user_id,
                note=text,
                created_at=now,
                updated_at=now,
            )
            with self.transaction():
                self.repository.create(note)

            self._log_operation("Note added", note.id, {"complaint_id": complaint.id})
            self._publish([ChangeEvent.for_complaint("complaint_notes", "insert", complaint)])
            return ServiceResult.success(NoteResponse.from_model(note), message="Note added")
        except Exception as e:
            return self._handle_exception(e, "add note", complaint_id)

    def delete_note(self, principal: Principal, note_id: str) -> ServiceResult[bool]:
        """Delete a note; only its author may do so, whatever their role."""
        try:
            note = self.repository.find_by_id(note_id)
            if note is None:
                raise ResourceNotFoundError("Note", note_id)
            if not can_delete_note(principal, note):
                raise AuthorizationError(
                    "Only the author can delete a note",
                    action="delete_note",
                    user_id=principal.user_id,
                )

            complaint = self._load_complaint(note.complaint_id)
            event = ChangeEvent.for_complaint("complaint_notes", "delete", complaint)
            with self.transaction():
                self.repository.delete(note)

            self._log_operation("Note deleted", note_id, {"complaint_id": complaint.id})
            self._publish([event])
            return ServiceResult.success(True, message="Note deleted")
        except Exception as e:
            return self._handle_exception(e, "delete note", note_id)

    def list_notes(self, principal: Principal, complaint_id: str) -> ServiceResult[List[NoteResponse]]:
        """Notes on a complaint, oldest first. Readable by anyone who can read the complaint."""
        try:
            complaint = self._load_complaint(complaint_id)
            require_read(principal, complaint)
            notes = self.repository.find_by_complaint(complaint.id)
            return ServiceResult.success([NoteResponse.from_model(n) for n in notes])
        except Exception as e:
            return self._handle_exception(e, "list notes", complaint_id)
