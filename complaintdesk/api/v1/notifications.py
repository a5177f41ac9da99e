"""
Notification feed: recent history entries over the caller's own complaints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from complaintdesk.api import deps
from complaintdesk.api.responses import result_or_raise
from complaintdesk.schemas.complaint import NotificationItem
from complaintdesk.services.common.permissions import Principal
from complaintdesk.services.complaint import NotificationFeedService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationItem])
def list_notifications(
    limit: Optional[int] = Query(None, ge=1, le=200),
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> List[NotificationItem]:
    return result_or_raise(NotificationFeedService(db).for_owner(principal, limit=limit))
