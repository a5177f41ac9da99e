import pytest

from complaintdesk.core.events import (
    ChangeEvent,
    ChangeNotifier,
    ChangeScope,
    ComplaintScope,
    OwnerScope,
    StaffScope,
)
from complaintdesk.models.base.enums import ComplaintStatus, UserRole
from complaintdesk.services.common.permissions import Principal


def event(complaint_id="c1", owner_id="owner", category_id="cat-a", table="complaints", action="update"):
    return ChangeEvent(table, action, complaint_id, owner_id, category_id)


def test_event_type_and_validation():
    e = event(table="complaint_notes", action="insert")
    assert e.event_type == "complaint_notes.insert"
    assert e.data == {"complaint_id": "c1", "owner_id": "owner", "category_id": "cat-a"}
    with pytest.raises(ValueError):
        event(table="profiles")
    with pytest.raises(ValueError):
        event(action="upsert")


def test_scopes_filter_events():
    notifier = ChangeNotifier()
    owner_sub = notifier.subscribe(OwnerScope("owner"))
    scoped_staff = notifier.subscribe(
        StaffScope(Principal("cat-admin", UserRole.CATEGORY_ADMIN, frozenset({"cat-a"})))
    )
    global_staff = notifier.subscribe(StaffScope(Principal("admin", UserRole.ADMIN)))
    detail_sub = notifier.subscribe(ComplaintScope("c2"))

    notifier.publish(event("c1", category_id="cat-a"))
    notifier.publish(event("c2", owner_id="someone", category_id="cat-b"))
    notifier.publish(event("c3", owner_id="someone", category_id=None))

    assert [e.complaint_id for e in owner_sub.drain()] == ["c1"]
    assert [e.complaint_id for e in scoped_staff.drain()] == ["c1"]
    assert [e.complaint_id for e in global_staff.drain()] == ["c1", "c2", "c3"]
    assert [e.complaint_id for e in detail_sub.drain()] == ["c2"]


def test_scope_without_matches_cannot_be_built():
    class Incomplete(ChangeScope):
        pass

    class Everything(ChangeScope):
        def matches(self, event):
            return True

    with pytest.raises(TypeError):
        Incomplete()
    with pytest.raises(TypeError):
        ChangeScope()

    notifier = ChangeNotifier()
    sub = notifier.subscribe(Everything())
    assert notifier.publish(event()) == 1
    assert sub.drain()[0].complaint_id == "c1"


def test_close_unsubscribes():
    notifier = ChangeNotifier()
    with notifier.subscribe(OwnerScope("owner")) as sub:
        assert notifier.subscriber_count() == 1
    assert sub.closed
    assert notifier.subscriber_count() == 0
    assert notifier.publish(event()) == 0
    sub.close()


def test_full_queue_drops_events():
    notifier = ChangeNotifier(queue_size=2)
    sub = notifier.subscribe(OwnerScope("owner"))

    delivered = [notifier.publish(event(f"c{i}")) for i in range(4)]

    assert delivered == [1, 1, 0, 0]
    assert sub.dropped == 2
    assert [e.complaint_id for e in sub.drain()] == ["c0", "c1"]
    assert notifier.get_stats() == {"subscribers": 1, "queued": 0, "dropped": 2}


def test_callback_errors_never_reach_the_publisher():
    notifier = ChangeNotifier()
    seen = []

    def broken(e):
        seen.append(e.complaint_id)
        raise RuntimeError("subscriber bug")

    sub = notifier.subscribe(OwnerScope("owner"), callback=broken)
    healthy = notifier.subscribe(OwnerScope("owner"))

    assert notifier.publish(event()) == 2
    assert seen == ["c1"]
    assert sub.pending() == 1
    assert healthy.get(timeout=0.1).complaint_id == "c1"


def test_get_times_out_when_empty():
    sub = ChangeNotifier().subscribe(OwnerScope("owner"))
    assert sub.get(timeout=0.01) is None


def test_status_change_notifies_owner_and_scoped_staff(
    complaint_service, notifier, file_complaint, principals, users
):
    complaint = file_complaint()
    owner = notifier.subscribe(OwnerScope(users["student"].id))
    network = notifier.subscribe(StaffScope(principals["network_admin"]))
    facilities = notifier.subscribe(StaffScope(principals["facilities_admin"]))

    complaint_service.set_status(principals["admin"], complaint.id, ComplaintStatus.VERIFIED)

    expected = ["complaints.update", "complaint_history.insert"]
    assert [e.event_type for e in owner.drain()] == expected
    assert [e.event_type for e in network.drain()] == expected
    assert facilities.drain() == []


def test_failed_mutation_publishes_nothing(complaint_service, notifier, file_complaint, principals, users):
    complaint = file_complaint()
    sub = notifier.subscribe(OwnerScope(users["student"].id))

    result = complaint_service.set_status(principals["student"], complaint.id, ComplaintStatus.VERIFIED)

    assert not result.is_success
    assert sub.drain() == []
