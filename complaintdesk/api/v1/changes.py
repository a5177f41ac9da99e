"""
Live change stream over WebSocket.

URL: /complaints/changes?token={jwt}[&complaint_id={id}]

The connection subscribes to the change notifier with a scope derived
from the caller:
    - complaint_id given: that complaint only (caller must be able to read it)
    - staff: every complaint the caller may read
    - students: their own complaints

Server frames:
    {"type": "subscribed", "scope": "owner" | "staff" | "complaint"}
    {"type": "change", "table": ..., "action": ..., "complaint_id": ..., "occurred_at": ...}

Frames carry no row data; clients refetch through the HTTP API.
"""

import asyncio
import contextlib
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from complaintdesk.api import deps
from complaintdesk.core.events import (
    ChangeEvent,
    ChangeNotifier,
    ChangeScope,
    ComplaintScope,
    OwnerScope,
    StaffScope,
    Subscription,
)
from complaintdesk.core.exceptions import AuthenticationError
from complaintdesk.core.logging import get_logger
from complaintdesk.services.base import ErrorCode
from complaintdesk.services.common.permissions import Principal
from complaintdesk.services.complaint import ComplaintService

logger = get_logger(__name__)

router = APIRouter(prefix="/complaints", tags=["Changes"])

CLOSE_UNAUTHENTICATED = 4001
CLOSE_FORBIDDEN = 4003
CLOSE_NOT_FOUND = 4004

# Upper bound on how long a closed socket waits for its queue poll to return
POLL_SECONDS = 0.5


def change_frame(event: ChangeEvent) -> dict:
    return {
        "type": "change",
        "table": event.table,
        "action": event.action,
        "complaint_id": event.complaint_id,
        "occurred_at": event.occurred_at.isoformat(),
    }


def scope_for(principal: Principal, complaint_id: Optional[str]) -> Tuple[str, ChangeScope]:
    if complaint_id:
        return "complaint", ComplaintScope(complaint_id)
    if principal.is_staff:
        return "staff", StaffScope(principal)
    return "owner", OwnerScope(principal.user_id)


async def _pump(websocket: WebSocket, subscription: Subscription) -> None:
    """Forward queued events to the socket until the subscription closes."""
    while not subscription.closed:
        event = await run_in_threadpool(subscription.get, POLL_SECONDS)
        if event is None:
            continue
        try:
            await websocket.send_json(change_frame(event))
        except Exception as e:
            logger.warning(f"Change stream send failed: {e}", extra={"complaint_id": event.complaint_id})
            return


@router.websocket("/changes")
async def change_stream(
    websocket: WebSocket,
    token: str = Query(..., description="Access token"),
    complaint_id: Optional[str] = Query(None),
    db: Session = Depends(deps.get_db),
    notifier: ChangeNotifier = Depends(deps.get_notifier),
):
    try:
        principal = deps.principal_from_token(token, db)
    except AuthenticationError as e:
        logger.warning(f"Rejected change stream token: {e.message}")
        await websocket.close(code=CLOSE_UNAUTHENTICATED, reason=e.message)
        return

    if complaint_id:
        result = ComplaintService(db).get(principal, complaint_id)
        if not result.is_success:
            code = CLOSE_NOT_FOUND if result.error_code == ErrorCode.NOT_FOUND else CLOSE_FORBIDDEN
            await websocket.close(code=code, reason=result.message)
            return

    scope_name, scope = scope_for(principal, complaint_id)
    subscription = notifier.subscribe(scope)
    pump: Optional[asyncio.Task] = None
    try:
        await websocket.accept()
        await websocket.send_json({"type": "subscribed", "scope": scope_name})
        logger.info(
            "Change stream opened",
            extra={"user_id": principal.user_id, "scope": scope_name, "complaint_id": complaint_id},
        )

        pump = asyncio.create_task(_pump(websocket, subscription))
        # Client frames are ignored; receiving only detects the disconnect
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Change stream closed", extra={"user_id": principal.user_id, "scope": scope_name})
    finally:
        subscription.close()
        if pump is not None:
            pump.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await pump
