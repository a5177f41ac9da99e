"""
Complaint models package.
"""

from complaintdesk.models.complaint.complaint import Complaint
from complaintdesk.models.complaint.complaint_history import ComplaintHistory
from complaintdesk.models.complaint.complaint_message import ComplaintMessage
from complaintdesk.models.complaint.complaint_note import ComplaintNote

__all__ = ["Complaint", "ComplaintHistory", "ComplaintNote", "ComplaintMessage"]
