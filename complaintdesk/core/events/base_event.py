"""
Base event classes for the change notification system.
"""
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import uuid4

from complaintdesk.core.utils import utcnow


class BaseEvent:
    """Base class for all events in the system."""

    def __init__(self, event_type: str, data: Optional[Dict[str, Any]] = None):
        self.event_id = str(uuid4())
        self.event_type = event_type
        self.data = data or {}
        self.timestamp = utcnow()

    def __str__(self) -> str:
        return f"{self.event_type}({self.event_id})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
        }


class ChangeEvent(BaseEvent):
    """
    A committed change to a complaint or one of its child tables.

    Carries no row payload: subscribers refetch through the services so
    that every read goes through the access policy.

    Attributes:
        table: complaints, complaint_history, complaint_notes or complaint_messages
        action: insert, update or delete
        complaint_id: Complaint the change belongs to
        owner_id: Owner of that complaint
        category_id: Category of that complaint at commit time
        occurred_at: Commit-side timestamp
    """

    TABLES = ("complaints", "complaint_history", "complaint_notes", "complaint_messages")
    ACTIONS = ("insert", "update", "delete")

    def __init__(
        self,
        table: str,
        action: str,
        complaint_id: str,
        owner_id: str,
        category_id: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        if table not in self.TABLES:
            raise ValueError(f"Unknown table for change event: {table}")
        if action not in self.ACTIONS:
            raise ValueError(f"Unknown change action: {action}")

        super().__init__(f"{table}.{action}")
        self.table = table
        self.action = action
        self.complaint_id = complaint_id
        self.owner_id = owner_id
        self.category_id = category_id
        self.occurred_at = occurred_at or self.timestamp
        self.data = {
            "complaint_id": complaint_id,
            "owner_id": owner_id,
            "category_id": category_id,
        }

    @classmethod
    def for_complaint(cls, table: str, action: str, complaint) -> "ChangeEvent":
        """Build an event from a loaded complaint row."""
        return cls(
            table=table,
            action=action,
            complaint_id=complaint.id,
            owner_id=complaint.user_id,
            category_id=complaint.category_id,
        )

    def __repr__(self) -> str:
        return f"<ChangeEvent({self.table}.{self.action}, complaint_id={self.complaint_id})>"
