import pytest
from starlette.websockets import WebSocketDisconnect

from complaintdesk.api.v1.changes import (
    CLOSE_FORBIDDEN,
    CLOSE_NOT_FOUND,
    CLOSE_UNAUTHENTICATED,
    scope_for,
)
from complaintdesk.core.events import ComplaintScope, OwnerScope, StaffScope
from complaintdesk.services.auth.security import create_access_token

API = "/api/v1"


def stream_url(users, key, complaint_id=None):
    url = f"{API}/complaints/changes?token={create_access_token(users[key].id)}"
    if complaint_id:
        url += f"&complaint_id={complaint_id}"
    return url


def test_scope_follows_the_caller(principals):
    assert scope_for(principals["student"], None) == ("owner", OwnerScope(principals["student"].user_id))
    name, scope = scope_for(principals["network_admin"], None)
    assert name == "staff"
    assert isinstance(scope, StaffScope)
    assert scope_for(principals["student"], "c1") == ("complaint", ComplaintScope("c1"))


def test_status_change_reaches_owner_and_scoped_staff(client, auth, users, filed, notifier):
    with client.websocket_connect(stream_url(users, "student")) as owner, client.websocket_connect(
        stream_url(users, "network_admin")
    ) as staff:
        assert owner.receive_json() == {"type": "subscribed", "scope": "owner"}
        assert staff.receive_json() == {"type": "subscribed", "scope": "staff"}
        assert notifier.subscriber_count() == 2

        response = client.patch(
            f"{API}/complaints/{filed['id']}/status",
            json={"status": "verified"},
            headers=auth("admin"),
        )
        assert response.status_code == 200

        for socket in (owner, staff):
            frames = [socket.receive_json(), socket.receive_json()]
            assert [(f["type"], f["table"], f["action"]) for f in frames] == [
                ("change", "complaints", "update"),
                ("change", "complaint_history", "insert"),
            ]
            assert {f["complaint_id"] for f in frames} == {filed["id"]}
            assert "occurred_at" in frames[0]

    assert notifier.subscriber_count() == 0


def test_complaint_stream_for_a_single_complaint(client, auth, users, filed, notifier):
    with client.websocket_connect(stream_url(users, "student", filed["id"])) as socket:
        assert socket.receive_json() == {"type": "subscribed", "scope": "complaint"}

        client.post(
            f"{API}/complaints/{filed['id']}/notes",
            json={"note": "Router checked"},
            headers=auth("network_admin"),
        )
        frame = socket.receive_json()
        assert (frame["table"], frame["action"], frame["complaint_id"]) == (
            "complaint_notes",
            "insert",
            filed["id"],
        )

    assert notifier.subscriber_count() == 0


def test_invalid_token_is_closed_before_accept(client, notifier):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect(f"{API}/complaints/changes?token=not-a-token"):
            pass
    assert exc.value.code == CLOSE_UNAUTHENTICATED
    assert notifier.subscriber_count() == 0


def test_unreadable_or_missing_complaint_is_refused(client, users, filed, notifier):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect(stream_url(users, "other_student", filed["id"])):
            pass
    assert exc.value.code == CLOSE_FORBIDDEN

    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect(stream_url(users, "admin", "missing")):
            pass
    assert exc.value.code == CLOSE_NOT_FOUND
    assert notifier.subscriber_count() == 0
