"""
Derived views over the activity ledger.

The ledger is the union of history entries (system-recorded transitions)
and staff notes. Anyone who can read a complaint sees both, its owner
included. Neither view writes anything.

Flat feed:
    all entries newest first; on equal timestamps a history entry sorts
    before a note.

Stage view:
    one row per forward stage. A stage is reached when a history entry
    moved the complaint into it (``pending`` is reached at creation). Each
    note is attached to the last reached stage entered at or before the
    note's timestamp. Rejection is shown as a separate banner and takes
    every note written from the moment of rejection.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from complaintdesk.core.exceptions import ComplaintNotFoundError
from complaintdesk.models.base.enums import ChangeType, ComplaintStatus
from complaintdesk.models.complaint import Complaint, ComplaintHistory, ComplaintNote
from complaintdesk.repositories.complaint import (
    ComplaintHistoryRepository,
    ComplaintNoteRepository,
    ComplaintRepository,
)
from complaintdesk.schemas.complaint import (
    ActivityItem,
    HistoryEntryResponse,
    NoteResponse,
    RejectionBanner,
    StageEntry,
    StageState,
    StageTimeline,
)
from complaintdesk.services.base import BaseService, ServiceResult
from complaintdesk.services.common.permissions import Principal, require_read
from complaintdesk.services.complaint.complaint_workflow import STAGE_ORDER, stage_index


class TimelineService(BaseService[Complaint, ComplaintRepository]):
    """Builds the flat and stage-grouped timelines of a complaint."""

    def __init__(self, db_session: Session):
        super().__init__(ComplaintRepository(db_session), db_session)
        self.history = ComplaintHistoryRepository(db_session)
        self.notes = ComplaintNoteRepository(db_session)

    def _load_ledger(
        self,
        principal: Principal,
        complaint_id: str,
    ) -> Tuple[Complaint, List[ComplaintHistory], List[ComplaintNote]]:
        complaint = self.repository.find_by_id(complaint_id)
        if complaint is None:
            raise ComplaintNotFoundError(complaint_id)
        require_read(principal, complaint)

        history = self.history.find_by_complaint(complaint.id)
        notes = self.notes.find_by_complaint(complaint.id)
        return complaint, history, notes

    # -------------------------------------------------------------------------
    # Flat feed
    # -------------------------------------------------------------------------

    def activity_feed(self, principal: Principal, complaint_id: str) -> ServiceResult[List[ActivityItem]]:
        try:
            _, history, notes = self._load_ledger(principal, complaint_id)

            items = [
                ActivityItem(kind="history", created_at=h.created_at, history=HistoryEntryResponse.from_model(h))
                for h in history
            ]
            items.extend(
                ActivityItem(kind="note", created_at=n.created_at, note=NoteResponse.from_model(n))
                for n in notes
            )
            items.sort(key=lambda item: (item.created_at, item.kind == "history"), reverse=True)
            return ServiceResult.success(items)
        except Exception as e:
            return self._handle_exception(e, "build activity feed", complaint_id)

    # -------------------------------------------------------------------------
    # Stage view
    # -------------------------------------------------------------------------

    @staticmethod
    def _stage_entries(
        complaint: Complaint,
        history: List[ComplaintHistory],
    ) -> Dict[ComplaintStatus, Tuple[datetime, Optional[str]]]:
        """Earliest (entered_at, actor) per reached stage."""
        created_by = next(
            (h.changed_by for h in history if h.change_type == ChangeType.CREATED),
            complaint.user_id,
        )
        entered = {ComplaintStatus.PENDING: (complaint.created_at, created_by)}

        for entry in history:
            if entry.change_type != ChangeType.STATUS_CHANGE:
                continue
            try:
                stage = ComplaintStatus(entry.new_value)
            except ValueError:
                continue
            if stage not in entered:
                entered[stage] = (entry.created_at, entry.changed_by)
        return entered

    @staticmethod
    def _rejection_entry(history: List[ComplaintHistory]) -> Optional[ComplaintHistory]:
        for entry in history:
            if entry.change_type == ChangeType.STATUS_CHANGE and entry.new_value == ComplaintStatus.REJECTED.value:
                return entry
        return None

    def stage_timeline(self, principal: Principal, complaint_id: str) -> ServiceResult[StageTimeline]:
        try:
            complaint, history, notes = self._load_ledger(principal, complaint_id)

            entered = self._stage_entries(complaint, history)
            rejected = complaint.status == ComplaintStatus.REJECTED

            banner = None
            if rejected:
                rejection = self._rejection_entry(history)
                from_status = None
                if rejection is not None and rejection.old_value:
                    try:
                        from_status = ComplaintStatus(rejection.old_value)
                    except ValueError:
                        from_status = None
                banner = RejectionBanner(
                    rejected_at=rejection.created_at if rejection else complaint.updated_at,
                    rejected_by=rejection.changed_by if rejection else None,
                    from_status=from_status,
                )
                current_index = stage_index(from_status) if from_status else 0
            else:
                current_index = stage_index(complaint.status)

            stages: List[StageEntry] = []
            for index, stage in enumerate(STAGE_ORDER):
                if rejected:
                    # No stage is active once the complaint is rejected
                    state = StageState.COMPLETED if index <= current_index else StageState.PENDING
                elif index < current_index:
                    state = StageState.COMPLETED
                elif index == current_index:
                    state = StageState.ACTIVE
                else:
                    state = StageState.PENDING

                entered_at, entered_by = entered.get(stage, (None, None))
                stages.append(
                    StageEntry(
                        stage=stage,
                        state=state,
                        reached=stage in entered,
                        entered_at=entered_at,
                        entered_by=entered_by,
                    )
                )

            reached = [s for s in stages if s.reached]
            for note in notes:
                item = NoteResponse.from_model(note)
                if banner is not None and note.created_at >= banner.rejected_at:
                    banner.notes.append(item)
                    continue
                owner = reached[0]
                for stage in reached:
                    if stage.entered_at <= note.created_at:
                        owner = stage
                owner.notes.append(item)

            return ServiceResult.success(
                StageTimeline(
                    complaint_id=complaint.id,
                    current_status=complaint.status,
                    stages=stages,
                    rejection=banner,
                )
            )
        except Exception as e:
            return self._handle_exception(e, "build stage timeline", complaint_id)
