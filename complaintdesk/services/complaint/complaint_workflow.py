"""
Complaint lifecycle state machine.

Stages run pending -> verified -> assigned -> in_progress -> resolved ->
closed. Moves may skip stages but never go back. ``rejected`` is a side
state reachable from any non-terminal status. ``closed`` and
``rejected`` are terminal.
"""

from typing import Optional, Tuple

from complaintdesk.core.exceptions import InvalidTransitionError
from complaintdesk.models.base.enums import ComplaintStatus

STAGE_ORDER: Tuple[ComplaintStatus, ...] = (
    ComplaintStatus.PENDING,
    ComplaintStatus.VERIFIED,
    ComplaintStatus.ASSIGNED,
    ComplaintStatus.IN_PROGRESS,
    ComplaintStatus.RESOLVED,
    ComplaintStatus.CLOSED,
)

TERMINAL_STATUSES = frozenset({ComplaintStatus.CLOSED, ComplaintStatus.REJECTED})


def stage_index(status: ComplaintStatus) -> Optional[int]:
    """Position of ``status`` in the stage order; None for rejected."""
    try:
        return STAGE_ORDER.index(status)
    except ValueError:
        return None


def is_terminal(status: ComplaintStatus) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: ComplaintStatus, requested: ComplaintStatus) -> bool:
    """
    Whether ``current -> requested`` is a legal move.

    Same-status requests are not moves; callers treat them as no-ops.
    """
    if current == requested or is_terminal(current):
        return False
    if requested == ComplaintStatus.REJECTED:
        return True
    return stage_index(requested) > stage_index(current)


def validate_transition(current: ComplaintStatus, requested: ComplaintStatus) -> None:
    """
    Raise unless ``current -> requested`` is legal.

    Raises:
        InvalidTransitionError: On backward moves or moves out of a terminal status
    """
    if not can_transition(current, requested):
        if is_terminal(current):
            message = f"Complaint is {current.value} and can no longer change status"
        else:
            message = None
        raise InvalidTransitionError(current.value, requested.value, message)


def assignment_moves_status(current: ComplaintStatus) -> bool:
    """Assignment advances the status only when it has not yet reached ``assigned``."""
    if is_terminal(current):
        return False
    return stage_index(current) < stage_index(ComplaintStatus.ASSIGNED)
