from datetime import timedelta

from complaintdesk.core.utils import utcnow
from complaintdesk.models.base.enums import ChangeType, ComplaintStatus, Priority
from complaintdesk.models.complaint import Complaint
from complaintdesk.services.complaint import ComplaintAnalyticsService, NotificationFeedService


def test_notification_feed_renders_owner_history(db, complaint_service, file_complaint, principals):
    complaint = file_complaint(title="Wifi down")
    file_complaint(title="Not mine", principal=principals["other_student"])
    complaint_service.set_status(principals["admin"], complaint.id, ComplaintStatus.VERIFIED)

    items = NotificationFeedService(db).for_owner(principals["student"]).data

    assert [i.change_type for i in items] == [ChangeType.STATUS_CHANGE, ChangeType.CREATED]
    assert items[0].message == 'Complaint "Wifi down" status changed from pending to verified'
    assert items[1].message == 'Your complaint "Wifi down" has been submitted'


def test_notification_feed_respects_limit(db, file_complaint, principals):
    for i in range(3):
        file_complaint(title=f"Complaint {i}")

    items = NotificationFeedService(db).for_owner(principals["student"], limit=2).data

    assert len(items) == 2


def test_overview_counts_in_scope_complaints(db, complaint_service, file_complaint, principals):
    wifi = file_complaint(title="Wifi down", priority=Priority.HIGH)
    file_complaint(title="Chair", category="facilities")
    file_complaint(title="Noise", category=None)
    complaint_service.set_status(principals["admin"], wifi.id, ComplaintStatus.RESOLVED)

    overview = ComplaintAnalyticsService(db).overview(principals["admin"]).data

    assert overview.total == 3
    assert overview.by_status == {"pending": 2, "resolved": 1}
    assert overview.by_priority == {"high": 1, "medium": 2}
    assert overview.by_category == {"Network": 1, "Facilities": 1, "Uncategorized": 1}
    assert len(overview.last_7_days) == 7
    assert overview.last_7_days[-1].day == utcnow().date()
    assert overview.last_7_days[-1].count == 3
    assert overview.average_resolution_days is not None
    assert overview.average_resolution_days >= 0

    scoped = ComplaintAnalyticsService(db).overview(principals["network_admin"]).data
    assert scoped.total == 1
    assert scoped.by_category == {"Network": 1}


def test_average_resolution_uses_first_resolved_move(db, complaint_service, users, categories, principals):
    created = utcnow() - timedelta(days=4)
    complaint = Complaint(
        user_id=users["student"].id,
        title="Old leak",
        description="Basement",
        priority=Priority.LOW,
        status=ComplaintStatus.IN_PROGRESS,
        category_id=categories["facilities"].id,
        attachments=[],
        created_at=created,
        updated_at=created,
    )
    db.add(complaint)
    db.commit()

    complaint_service.set_status(principals["admin"], complaint.id, ComplaintStatus.RESOLVED)

    overview = ComplaintAnalyticsService(db).overview(principals["student"]).data
    assert overview.total == 1
    assert 3.99 <= overview.average_resolution_days <= 4.01
    assert sum(day.count for day in overview.last_7_days) == 1
