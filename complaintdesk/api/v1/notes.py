from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from complaintdesk.api import deps
from complaintdesk.api.responses import result_or_raise
from complaintdesk.core.events import ChangeNotifier
from complaintdesk.services.common.permissions import Principal
from complaintdesk.services.complaint import NoteService

router = APIRouter(prefix="/notes", tags=["Complaints"])


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(
    note_id: str,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
    notifier: ChangeNotifier = Depends(deps.get_notifier),
) -> Response:
    """Delete a note; only its author may."""
    result_or_raise(NoteService(db, notifier).delete_note(principal, note_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
