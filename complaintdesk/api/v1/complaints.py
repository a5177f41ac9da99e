"""
Complaint endpoints: filing, listing, lifecycle changes, the activity
ledger and the messaging thread.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from complaintdesk.api import deps
from complaintdesk.api.responses import result_or_raise
from complaintdesk.config.settings import settings
from complaintdesk.core.events import ChangeNotifier
from complaintdesk.models.base.enums import ComplaintStatus, Priority
from complaintdesk.schemas.common import PaginatedResponse
from complaintdesk.schemas.complaint import (
    ActivityItem,
    AssignableAdmin,
    ComplaintAssign,
    ComplaintCreate,
    ComplaintDeadlineUpdate,
    ComplaintDetail,
    ComplaintFilterParams,
    ComplaintPriorityUpdate,
    ComplaintStatusUpdate,
    MessageCreate,
    MessageResponse,
    NoteCreate,
    NoteResponse,
    StageTimeline,
)
from complaintdesk.services.common.permissions import Principal
from complaintdesk.services.complaint import (
    ComplaintService,
    MessageService,
    NoteService,
    TimelineService,
)

router = APIRouter(prefix="/complaints", tags=["Complaints"])


def get_complaint_service(
    db: Session = Depends(deps.get_db),
    notifier: ChangeNotifier = Depends(deps.get_notifier),
) -> ComplaintService:
    return ComplaintService(db, notifier)


# ---------------------------------------------------------------------------
# Complaints
# ---------------------------------------------------------------------------

@router.post("", response_model=ComplaintDetail, status_code=status.HTTP_201_CREATED)
def create_complaint(
    payload: ComplaintCreate,
    response: Response,
    principal: Principal = Depends(deps.get_current_principal),
    service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintDetail:
    """File a complaint; a replayed idempotency key answers 200 with the original."""
    result = service.create(principal, payload)
    complaint = result_or_raise(result)
    if result.metadata and result.metadata.get("replayed"):
        response.status_code = status.HTTP_200_OK
    return complaint


@router.get("", response_model=PaginatedResponse[ComplaintDetail])
def list_complaints(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = Query(None),
    category_id: Optional[str] = Query(None),
    priority: Optional[Priority] = Query(None),
    status_filter: Optional[ComplaintStatus] = Query(None, alias="status"),
    principal: Principal = Depends(deps.get_current_principal),
    service: ComplaintService = Depends(get_complaint_service),
) -> PaginatedResponse[ComplaintDetail]:
    filters = ComplaintFilterParams(
        page=page,
        page_size=page_size,
        search=search,
        category_id=category_id,
        priority=priority,
        status=status_filter,
    )
    return result_or_raise(service.list_for_principal(principal, filters))


@router.get("/{complaint_id}", response_model=ComplaintDetail)
def get_complaint(
    complaint_id: str,
    principal: Principal = Depends(deps.get_current_principal),
    service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintDetail:
    return result_or_raise(service.get(principal, complaint_id))


@router.delete("/{complaint_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_complaint(
    complaint_id: str,
    principal: Principal = Depends(deps.get_current_principal),
    service: ComplaintService = Depends(get_complaint_service),
) -> Response:
    result_or_raise(service.delete(principal, complaint_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{complaint_id}/status", response_model=ComplaintDetail)
def update_status(
    complaint_id: str,
    payload: ComplaintStatusUpdate,
    principal: Principal = Depends(deps.get_current_principal),
    service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintDetail:
    return result_or_raise(service.set_status(principal, complaint_id, payload.status))


@router.patch("/{complaint_id}/priority", response_model=ComplaintDetail)
def update_priority(
    complaint_id: str,
    payload: ComplaintPriorityUpdate,
    principal: Principal = Depends(deps.get_current_principal),
    service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintDetail:
    return result_or_raise(service.set_priority(principal, complaint_id, payload.priority))


@router.post("/{complaint_id}/assign", response_model=ComplaintDetail)
def assign_complaint(
    complaint_id: str,
    payload: ComplaintAssign,
    principal: Principal = Depends(deps.get_current_principal),
    service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintDetail:
    return result_or_raise(service.assign(principal, complaint_id, payload.admin_id, payload.note))


@router.get("/{complaint_id}/assignable-admins", response_model=List[AssignableAdmin])
def list_assignable_admins(
    complaint_id: str,
    principal: Principal = Depends(deps.get_current_principal),
    service: ComplaintService = Depends(get_complaint_service),
) -> List[AssignableAdmin]:
    return result_or_raise(service.list_assignable_admins(principal, complaint_id))


@router.put("/{complaint_id}/deadline", response_model=ComplaintDetail)
def set_deadline(
    complaint_id: str,
    payload: ComplaintDeadlineUpdate,
    principal: Principal = Depends(deps.get_current_principal),
    service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintDetail:
    return result_or_raise(service.set_deadline(principal, complaint_id, payload.deadline, payload.note))


# ---------------------------------------------------------------------------
# Ledger views
# ---------------------------------------------------------------------------

@router.get("/{complaint_id}/timeline", response_model=StageTimeline)
def stage_timeline(
    complaint_id: str,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> StageTimeline:
    return result_or_raise(TimelineService(db).stage_timeline(principal, complaint_id))


@router.get("/{complaint_id}/activity", response_model=List[ActivityItem])
def activity_feed(
    complaint_id: str,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> List[ActivityItem]:
    return result_or_raise(TimelineService(db).activity_feed(principal, complaint_id))


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------

@router.get("/{complaint_id}/notes", response_model=List[NoteResponse])
def list_notes(
    complaint_id: str,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> List[NoteResponse]:
    return result_or_raise(NoteService(db).list_notes(principal, complaint_id))


@router.post("/{complaint_id}/notes", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def add_note(
    complaint_id: str,
    payload: NoteCreate,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
    notifier: ChangeNotifier = Depends(deps.get_notifier),
) -> NoteResponse:
    return result_or_raise(NoteService(db, notifier).add_note(principal, complaint_id, payload.note))


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

@router.get("/{complaint_id}/messages", response_model=List[MessageResponse])
def list_messages(
    complaint_id: str,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> List[MessageResponse]:
    return result_or_raise(MessageService(db).list_messages(principal, complaint_id))


@router.post("/{complaint_id}/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    complaint_id: str,
    payload: MessageCreate,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
    notifier: ChangeNotifier = Depends(deps.get_notifier),
) -> MessageResponse:
    return result_or_raise(MessageService(db, notifier).send(principal, complaint_id, payload.message))


@router.get("/{complaint_id}/messages/count")
def message_count(
    complaint_id: str,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> dict:
    return {"count": result_or_raise(MessageService(db).message_count(principal, complaint_id))}
