"""
Subscription scopes.

A scope decides server-side which change events a subscriber receives.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass

from complaintdesk.core.events.base_event import ChangeEvent
from complaintdesk.services.common.permissions import Principal, can_read_ref


class ChangeScope(ABC):
    """Base scope; subclasses implement ``matches``."""

    @abstractmethod
    def matches(self, event: ChangeEvent) -> bool:
        """Whether a subscriber with this scope receives ``event``."""


@dataclass(frozen=True)
class OwnerScope(ChangeScope):
    """Changes to complaints owned by one student."""

    user_id: str

    def matches(self, event: ChangeEvent) -> bool:
        return event.owner_id == self.user_id


@dataclass(frozen=True)
class StaffScope(ChangeScope):
    """Changes the principal is allowed to read."""

    principal: Principal

    def matches(self, event: ChangeEvent) -> bool:
        return can_read_ref(self.principal, event.owner_id, event.category_id)


@dataclass(frozen=True)
class ComplaintScope(ChangeScope):
    """Changes to a single complaint (detail views, chat threads)."""

    complaint_id: str

    def matches(self, event: ChangeEvent) -> bool:
        return event.complaint_id == self.complaint_id
