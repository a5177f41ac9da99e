from datetime import timedelta

import pytest

from complaintdesk.core.utils import utcnow
from complaintdesk.models.base.enums import ChangeType, ComplaintStatus, Priority
from complaintdesk.models.complaint import Complaint, ComplaintHistory, ComplaintNote
from complaintdesk.schemas.complaint import StageState
from complaintdesk.services.base import ErrorCode
from complaintdesk.services.complaint import TimelineService

S = ComplaintStatus


@pytest.fixture
def t0():
    return utcnow() - timedelta(days=2)


@pytest.fixture
def ledger(db, users, categories, t0):
    """Build a complaint and its ledger rows with fixed timestamps."""
    admin = users["admin"]

    def _build(status, moves, notes):
        complaint = Complaint(
            user_id=users["student"].id,
            title="Heater broken",
            description="Room 12",
            priority=Priority.MEDIUM,
            status=status,
            category_id=categories["facilities"].id,
            attachments=[],
            created_at=t0,
            updated_at=t0,
        )
        db.add(complaint)
        db.flush()
        db.add(ComplaintHistory(
            complaint_id=complaint.id,
            change_type=ChangeType.CREATED,
            new_value="pending",
            changed_by=users["student"].id,
            created_at=t0,
        ))
        for old, new, minutes in moves:
            db.add(ComplaintHistory(
                complaint_id=complaint.id,
                change_type=ChangeType.STATUS_CHANGE,
                old_value=old.value,
                new_value=new.value,
                changed_by=admin.id,
                created_at=t0 + timedelta(minutes=minutes),
            ))
        for text, minutes in notes:
            at = t0 + timedelta(minutes=minutes)
            db.add(ComplaintNote(
                complaint_id=complaint.id,
                admin_id=admin.id,
                note=text,
                created_at=at,
                updated_at=at,
            ))
        db.commit()
        return complaint

    return _build


def notes_by_stage(timeline):
    return {entry.stage: [n.note for n in entry.notes] for entry in timeline.stages}


def test_pending_stage_entered_at_creation(db, ledger, principals, t0):
    complaint = ledger(S.PENDING, [], [])

    timeline = TimelineService(db).stage_timeline(principals["admin"], complaint.id).data

    pending = timeline.stages[0]
    assert pending.stage == S.PENDING
    assert pending.entered_at == complaint.created_at == t0
    assert pending.state == StageState.ACTIVE
    assert all(s.state == StageState.PENDING for s in timeline.stages[1:])
    assert timeline.rejection is None


def test_stage_view_groups_notes_by_stage(db, ledger, principals):
    complaint = ledger(
        S.IN_PROGRESS,
        [(S.PENDING, S.VERIFIED, 10), (S.VERIFIED, S.IN_PROGRESS, 30)],
        [("first look", 5), ("waiting on parts", 20), ("on site", 30), ("fixing", 45)],
    )

    timeline = TimelineService(db).stage_timeline(principals["admin"], complaint.id).data

    states = {s.stage: s.state for s in timeline.stages}
    assert states == {
        S.PENDING: StageState.COMPLETED,
        S.VERIFIED: StageState.COMPLETED,
        S.ASSIGNED: StageState.COMPLETED,
        S.IN_PROGRESS: StageState.ACTIVE,
        S.RESOLVED: StageState.PENDING,
        S.CLOSED: StageState.PENDING,
    }
    reached = {s.stage for s in timeline.stages if s.reached}
    assert reached == {S.PENDING, S.VERIFIED, S.IN_PROGRESS}
    assert notes_by_stage(timeline) == {
        S.PENDING: ["first look"],
        S.VERIFIED: ["waiting on parts"],
        S.ASSIGNED: [],
        S.IN_PROGRESS: ["on site", "fixing"],
        S.RESOLVED: [],
        S.CLOSED: [],
    }


def test_rejection_is_a_banner(db, ledger, principals, users, t0):
    complaint = ledger(
        S.REJECTED,
        [(S.PENDING, S.VERIFIED, 10), (S.VERIFIED, S.REJECTED, 20)],
        [("checking", 15), ("duplicate report", 20), ("closed out", 25)],
    )

    timeline = TimelineService(db).stage_timeline(principals["admin"], complaint.id).data

    banner = timeline.rejection
    assert banner is not None
    assert banner.from_status == S.VERIFIED
    assert banner.rejected_by == users["admin"].id
    assert banner.rejected_at == t0 + timedelta(minutes=20)
    assert [n.note for n in banner.notes] == ["duplicate report", "closed out"]
    assert notes_by_stage(timeline)[S.VERIFIED] == ["checking"]
    assert S.REJECTED not in {s.stage for s in timeline.stages}
    assert [s.state for s in timeline.stages] == [
        StageState.COMPLETED,
        StageState.COMPLETED,
        StageState.PENDING,
        StageState.PENDING,
        StageState.PENDING,
        StageState.PENDING,
    ]


def test_activity_feed_is_newest_first_with_history_before_note_on_ties(db, ledger, principals):
    complaint = ledger(
        S.VERIFIED,
        [(S.PENDING, S.VERIFIED, 10)],
        [("same time", 10), ("later", 20)],
    )

    feed = TimelineService(db).activity_feed(principals["admin"], complaint.id).data

    assert [item.kind for item in feed] == ["note", "history", "note", "history"]
    assert feed[0].note.note == "later"
    assert feed[1].history.new_value == "verified"
    assert feed[2].note.note == "same time"
    assert feed[3].history.change_type == ChangeType.CREATED


def test_owner_sees_staff_notes_in_both_views(db, ledger, principals):
    complaint = ledger(S.VERIFIED, [(S.PENDING, S.VERIFIED, 10)], [("router replaced", 12)])
    service = TimelineService(db)

    feed = service.activity_feed(principals["student"], complaint.id).data
    timeline = service.stage_timeline(principals["student"], complaint.id).data

    assert [item.kind for item in feed] == ["note", "history", "history"]
    assert feed[0].note.note == "router replaced"
    assert notes_by_stage(timeline)[S.VERIFIED] == ["router replaced"]


def test_owner_sees_assignment_note_written_by_staff(db, complaint_service, file_complaint, principals, users):
    complaint = file_complaint()
    complaint_service.assign(principals["network_admin"], complaint.id, users["network_admin"].id, note="on it")

    feed = TimelineService(db).activity_feed(principals["student"], complaint.id).data

    notes = [item.note.note for item in feed if item.kind == "note"]
    assert notes == ["Assigned to admin. Note: on it"]


def test_out_of_scope_principal_is_denied(db, ledger, principals):
    complaint = ledger(S.PENDING, [], [])

    result = TimelineService(db).stage_timeline(principals["network_admin"], complaint.id)

    assert result.error_code == ErrorCode.UNAUTHORIZED
