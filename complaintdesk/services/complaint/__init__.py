"""
Complaint services package.

Services:
    - ComplaintService: lifecycle, assignment, deadline, delete, listing
    - NoteService: staff notes
    - MessageService: owner/staff message thread
    - TimelineService: flat and stage-grouped ledger views
    - NotificationFeedService: student notification feed
    - ComplaintAnalyticsService: scoped counts and trends
"""

from complaintdesk.services.complaint.complaint_analytics_service import ComplaintAnalyticsService
from complaintdesk.services.complaint.complaint_message_service import MessageService
from complaintdesk.services.complaint.complaint_note_service import NoteService
from complaintdesk.services.complaint.complaint_service import ComplaintService
from complaintdesk.services.complaint.complaint_timeline_service import TimelineService
from complaintdesk.services.complaint.notification_feed_service import NotificationFeedService

__all__ = [
    "ComplaintService",
    "NoteService",
    "MessageService",
    "TimelineService",
    "NotificationFeedService",
    "ComplaintAnalyticsService",
]
