"""
Change notification: events, scopes and the in-process notifier.
"""
from complaintdesk.core.events.base_event import BaseEvent, ChangeEvent
from complaintdesk.core.events.event_bus import (
    ChangeNotifier,
    Subscription,
    change_notifier,
    get_change_notifier,
)
from complaintdesk.core.events.scopes import ChangeScope, ComplaintScope, OwnerScope, StaffScope

__all__ = [
    "BaseEvent",
    "ChangeEvent",
    "ChangeNotifier",
    "Subscription",
    "ChangeScope",
    "OwnerScope",
    "StaffScope",
    "ComplaintScope",
    "change_notifier",
    "get_change_notifier",
]
