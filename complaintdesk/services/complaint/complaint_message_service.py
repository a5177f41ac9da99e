"""
Per-complaint message thread between the owner and staff.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from complaintdesk.core.events import ChangeEvent, ChangeNotifier
from complaintdesk.core.exceptions import AuthorizationError, ComplaintNotFoundError, ValidationError
from complaintdesk.core.utils import utcnow
from complaintdesk.models.complaint import Complaint, ComplaintMessage
from complaintdesk.repositories.complaint import ComplaintMessageRepository, ComplaintRepository
from complaintdesk.schemas.complaint import MessageResponse
from complaintdesk.services.base import BaseService, ServiceResult
from complaintdesk.services.common.permissions import Principal, can_send_message, require_read


class MessageService(BaseService[ComplaintMessage, ComplaintMessageRepository]):
    """
    Messages are append-only. ``is_admin`` records whether the sender held
    a staff role when the message was sent and is never recomputed.
    """

    def __init__(self, db_session: Session, notifier: Optional[ChangeNotifier] = None):
        super().__init__(ComplaintMessageRepository(db_session), db_session, notifier)
        self.complaints = ComplaintRepository(db_session)

    def _load_complaint(self, complaint_id: str) -> Complaint:
        complaint = self.complaints.find_by_id(complaint_id)
        if complaint is None:
            raise ComplaintNotFoundError(complaint_id)
        return complaint

    def send(self, principal: Principal, complaint_id: str, text: str) -> ServiceResult[MessageResponse]:
        try:
            complaint = self._load_complaint(complaint_id)
            if not can_send_message(principal, complaint):
                raise AuthorizationError(
                    "Not authorized to message on this complaint",
                    action="send_message",
                    user_id=principal.user_id,
                )

            text = (text or "").strip()
            if not text:
                raise ValidationError("Message cannot be empty", field="message")

            message = ComplaintMessage(
                complaint_id=complaint.id,
                sender_id=principal.user_id,
                message=text,
                is_admin=principal.is_staff,
                created_at=utcnow(),
            )
            with self.transaction():
                self.repository.create(message)

            self._log_operation("Message sent", message.id, {"complaint_id": complaint.id})
            self._publish([ChangeEvent.for_complaint("complaint_messages", "insert", complaint)])
            return ServiceResult.success(MessageResponse.from_model(message))
        except Exception as e:
            return self._handle_exception(e, "send message", complaint_id)

    def list_messages(self, principal: Principal, complaint_id: str) -> ServiceResult[List[MessageResponse]]:
        """The thread, oldest first."""
        try:
            complaint = self._load_complaint(complaint_id)
            require_read(principal, complaint)
            messages = self.repository.find_by_complaint(complaint.id)
            return ServiceResult.success([MessageResponse.from_model(m) for m in messages])
        except Exception as e:
            return self._handle_exception(e, "list messages", complaint_id)

    def message_count(self, principal: Principal, complaint_id: str) -> ServiceResult[int]:
        try:
            complaint = self._load_complaint(complaint_id)
            require_read(principal, complaint)
            return ServiceResult.success(self.repository.count_by_complaint(complaint.id))
        except Exception as e:
            return self._handle_exception(e, "count messages", complaint_id)
