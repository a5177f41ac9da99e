"""
Complaint analytics over the caller's scope.
"""

from datetime import datetime, time, timedelta, timezone
from typing import Dict, Optional

from sqlalchemy.orm import Session

from complaintdesk.core.constants import UNCATEGORIZED_LABEL
from complaintdesk.core.utils import utcnow
from complaintdesk.models.base.enums import ChangeType, ComplaintStatus
from complaintdesk.models.complaint import Complaint
from complaintdesk.repositories.category import CategoryRepository
from complaintdesk.repositories.complaint import ComplaintHistoryRepository, ComplaintRepository
from complaintdesk.schemas.complaint import ComplaintOverview, DailyCount
from complaintdesk.services.base import BaseService, ServiceResult
from complaintdesk.services.common.permissions import Principal

RESOLVED_STATUSES = (ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED)
TREND_DAYS = 7


class ComplaintAnalyticsService(BaseService[Complaint, ComplaintRepository]):

    def __init__(self, db_session: Session):
        super().__init__(ComplaintRepository(db_session), db_session)
        self.history = ComplaintHistoryRepository(db_session)
        self.categories = CategoryRepository(db_session)

    def _resolved_at(self, complaint: Complaint) -> datetime:
        """First move into resolved, else into closed, else the last update."""
        moves: Dict[str, datetime] = {}
        for entry in self.history.find_by_complaint(complaint.id):
            if entry.change_type == ChangeType.STATUS_CHANGE and entry.new_value not in moves:
                moves[entry.new_value] = entry.created_at
        for status in RESOLVED_STATUSES:
            if status.value in moves:
                return moves[status.value]
        return complaint.updated_at

    def overview(self, principal: Principal) -> ServiceResult[ComplaintOverview]:
        """
        Counts by status, priority and category, the last seven days of
        filings and the mean resolution time in days.
        """
        try:
            if principal.is_staff:
                owner_id, category_ids = None, principal.visible_category_ids()
            else:
                owner_id, category_ids = principal.user_id, None

            stats = self.repository.get_complaint_statistics(owner_id, category_ids)

            names = {c.id: c.name for c in self.categories.list_ordered()}
            by_category: Dict[str, int] = {}
            for category_id, count in stats["category_breakdown"].items():
                label = names.get(category_id, UNCATEGORIZED_LABEL) if category_id else UNCATEGORIZED_LABEL
                by_category[label] = by_category.get(label, 0) + count

            today = utcnow().date()
            first_day = today - timedelta(days=TREND_DAYS - 1)
            since = datetime.combine(first_day, time.min, tzinfo=timezone.utc)
            daily = {first_day + timedelta(days=i): 0 for i in range(TREND_DAYS)}
            for complaint in self.repository.find_in_scope(owner_id, category_ids, created_from=since):
                day = complaint.created_at.date()
                if day in daily:
                    daily[day] += 1

            average: Optional[float] = None
            resolved = [
                c for c in self.repository.find_in_scope(owner_id, category_ids)
                if c.status in RESOLVED_STATUSES
            ]
            if resolved:
                total_seconds = sum(
                    (self._resolved_at(c) - c.created_at).total_seconds() for c in resolved
                )
                average = round(total_seconds / len(resolved) / 86400, 2)

            return ServiceResult.success(
                ComplaintOverview(
                    total=stats["total_complaints"],
                    by_status=stats["status_breakdown"],
                    by_priority=stats["priority_breakdown"],
                    by_category=by_category,
                    last_7_days=[DailyCount(day=day, count=count) for day, count in daily.items()],
                    average_resolution_days=average,
                )
            )
        except Exception as e:
            return self._handle_exception(e, "build complaint overview")
