from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from complaintdesk.api import deps
from complaintdesk.api.responses import result_or_raise
from complaintdesk.schemas.complaint import ComplaintOverview
from complaintdesk.services.common.permissions import Principal
from complaintdesk.services.complaint import ComplaintAnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics & Reporting"])


@router.get("/overview", response_model=ComplaintOverview)
def complaint_overview(
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> ComplaintOverview:
    """Counts and resolution time over the complaints the caller can see."""
    return result_or_raise(ComplaintAnalyticsService(db).overview(principal))
