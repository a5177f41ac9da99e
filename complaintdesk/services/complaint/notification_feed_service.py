"""
Student notification feed.

The feed is derived from the history ledger of the caller's own
complaints; nothing is stored per notification.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from complaintdesk.config.settings import settings
from complaintdesk.models.base.enums import ChangeType
from complaintdesk.models.complaint import ComplaintHistory
from complaintdesk.repositories.complaint import ComplaintHistoryRepository
from complaintdesk.schemas.complaint import NotificationItem
from complaintdesk.services.base import BaseService, ServiceResult
from complaintdesk.services.common.permissions import Principal

MESSAGE_TEMPLATES = {
    ChangeType.CREATED: 'Your complaint "{title}" has been submitted',
    ChangeType.STATUS_CHANGE: 'Complaint "{title}" status changed from {old} to {new}',
    ChangeType.PRIORITY_CHANGE: 'Complaint "{title}" priority changed from {old} to {new}',
}
FALLBACK_TEMPLATE = 'Update on complaint "{title}"'


def render_message(entry: ComplaintHistory) -> str:
    template = MESSAGE_TEMPLATES.get(entry.change_type, FALLBACK_TEMPLATE)
    return template.format(
        title=entry.complaint.title,
        old=entry.old_value,
        new=entry.new_value,
    )


class NotificationFeedService(BaseService[ComplaintHistory, ComplaintHistoryRepository]):

    def __init__(self, db_session: Session):
        super().__init__(ComplaintHistoryRepository(db_session), db_session)

    def for_owner(
        self,
        principal: Principal,
        limit: Optional[int] = None,
    ) -> ServiceResult[List[NotificationItem]]:
        """Latest history entries over the caller's complaints, newest first."""
        try:
            limit = limit or settings.NOTIFICATION_FEED_LIMIT
            entries = self.repository.find_for_owner(principal.user_id, limit=limit)
            items = [
                NotificationItem(
                    id=entry.id,
                    complaint_id=entry.complaint_id,
                    complaint_title=entry.complaint.title,
                    change_type=entry.change_type,
                    old_value=entry.old_value,
                    new_value=entry.new_value,
                    message=render_message(entry),
                    created_at=entry.created_at,
                )
                for entry in entries
            ]
            return ServiceResult.success(items)
        except Exception as e:
            return self._handle_exception(e, "load notifications", principal.user_id)
