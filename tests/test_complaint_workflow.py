import itertools

import pytest

from complaintdesk.core.exceptions import InvalidTransitionError
from complaintdesk.models.base.enums import ComplaintStatus
from complaintdesk.services.complaint.complaint_workflow import (
    STAGE_ORDER,
    assignment_moves_status,
    can_transition,
    is_terminal,
    stage_index,
    validate_transition,
)

S = ComplaintStatus


def test_stage_order():
    assert [s.value for s in STAGE_ORDER] == [
        "pending", "verified", "assigned", "in_progress", "resolved", "closed",
    ]
    assert stage_index(S.REJECTED) is None


@pytest.mark.parametrize("current,requested", itertools.product(list(S), list(S)))
def test_no_move_decreases_stage_index(current, requested):
    if not can_transition(current, requested):
        return
    assert not is_terminal(current)
    if requested != S.REJECTED:
        assert stage_index(requested) > stage_index(current)


def test_forward_moves_may_skip_stages():
    assert can_transition(S.PENDING, S.IN_PROGRESS)
    assert can_transition(S.VERIFIED, S.CLOSED)


@pytest.mark.parametrize("current", [S.PENDING, S.VERIFIED, S.ASSIGNED, S.IN_PROGRESS, S.RESOLVED])
def test_rejected_reachable_from_every_non_terminal_status(current):
    assert can_transition(current, S.REJECTED)


@pytest.mark.parametrize("terminal", [S.CLOSED, S.REJECTED])
def test_terminal_statuses_do_not_move(terminal):
    assert all(not can_transition(terminal, s) for s in S)
    with pytest.raises(InvalidTransitionError) as exc:
        validate_transition(terminal, S.PENDING)
    assert "can no longer change status" in exc.value.message


def test_backward_move_raises():
    with pytest.raises(InvalidTransitionError) as exc:
        validate_transition(S.IN_PROGRESS, S.VERIFIED)
    assert exc.value.current == "in_progress"
    assert exc.value.requested == "verified"


def test_same_status_is_not_a_move():
    assert not can_transition(S.PENDING, S.PENDING)


@pytest.mark.parametrize(
    "current,expected",
    [
        (S.PENDING, True),
        (S.VERIFIED, True),
        (S.ASSIGNED, False),
        (S.IN_PROGRESS, False),
        (S.RESOLVED, False),
        (S.CLOSED, False),
        (S.REJECTED, False),
    ],
)
def test_assignment_moves_status_only_before_assigned(current, expected):
    assert assignment_moves_status(current) is expected
