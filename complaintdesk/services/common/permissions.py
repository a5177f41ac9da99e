# complaintdesk/services/common/permissions.py
"""
Access policy for complaints.

A Principal is resolved once per request and passed explicitly to every
service call. The predicates below are pure functions of the principal
and the target record; they never touch the database.

Rules:
    - Owners read their own complaints but never mutate them.
    - admin and super_admin read and write every complaint.
    - category_admin reads and writes complaints whose category is in the
      admin's scope; uncategorized complaints are outside every scope.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, FrozenSet, Iterable, Optional

from complaintdesk.core.exceptions import AuthorizationError
from complaintdesk.models.base.enums import GLOBAL_ADMIN_ROLES, STAFF_ROLES, UserRole
from complaintdesk.repositories.category import AdminCategoryAssignmentRepository
from complaintdesk.repositories.user import UserRoleRepository

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from complaintdesk.models.complaint.complaint import Complaint
    from complaintdesk.models.complaint.complaint_note import ComplaintNote


@dataclass(frozen=True)
class Principal:
    """
    Represents an authenticated user in the service layer.

    Attributes:
        user_id: Identifier of the user
        role: The user's single active role
        category_ids: Category scope; only meaningful for category admins
    """
    user_id: str
    role: UserRole
    category_ids: FrozenSet[str] = field(default_factory=frozenset)

    def has_role(self, role: UserRole) -> bool:
        """Check if principal has a specific role."""
        return self.role == role

    def has_any_role(self, roles: Iterable[UserRole]) -> bool:
        """Check if principal has any of the specified roles."""
        return self.role in set(roles)

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_global_admin(self) -> bool:
        return self.role in GLOBAL_ADMIN_ROLES

    def manages(self, category_id: Optional[str]) -> bool:
        """True when ``category_id`` falls inside this principal's staff scope."""
        if self.is_global_admin:
            return True
        if self.role == UserRole.CATEGORY_ADMIN:
            return category_id is not None and category_id in self.category_ids
        return False

    def visible_category_ids(self) -> Optional[FrozenSet[str]]:
        """Category restriction for staff listings; None means unrestricted."""
        if self.is_global_admin:
            return None
        return self.category_ids


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def can_read_ref(principal: Principal, owner_id: str, category_id: Optional[str]) -> bool:
    """Read check on bare owner/category values (used for change events)."""
    return owner_id == principal.user_id or principal.manages(category_id)


def can_read(principal: Principal, complaint: "Complaint") -> bool:
    """Owner, global admins, or a category admin scoped to the complaint's category."""
    return can_read_ref(principal, complaint.user_id, complaint.category_id)


def can_write(principal: Principal, complaint: "Complaint") -> bool:
    """Global admins, or a category admin scoped to the complaint's category."""
    return principal.manages(complaint.category_id)


def can_manage_category(principal: Principal, category_id: Optional[str]) -> bool:
    """Whether ``principal`` is eligible to be assigned complaints in ``category_id``."""
    return principal.manages(category_id)


def can_delete_note(principal: Principal, note: "ComplaintNote") -> bool:
    return note.admin_id == principal.user_id


def can_send_message(principal: Principal, complaint: "Complaint") -> bool:
    return can_read(principal, complaint)


def is_staff(principal: Principal) -> bool:
    return principal.is_staff


def is_super_admin(principal: Principal) -> bool:
    return principal.role == UserRole.SUPER_ADMIN


# ---------------------------------------------------------------------------
# Assertions
# ---------------------------------------------------------------------------

def require_read(principal: Principal, complaint: "Complaint") -> None:
    if not can_read(principal, complaint):
        raise AuthorizationError(
            "Not authorized to view this complaint",
            action="read",
            user_id=principal.user_id,
        )


def require_write(principal: Principal, complaint: "Complaint") -> None:
    if not can_write(principal, complaint):
        raise AuthorizationError(
            "Not authorized to modify this complaint",
            action="write",
            user_id=principal.user_id,
        )


def require_role(
    principal: Principal,
    allowed_roles: Iterable[UserRole],
    *,
    error_message: Optional[str] = None,
) -> None:
    """
    Assert that principal has one of the allowed roles.

    Raises:
        AuthorizationError: If principal lacks required role
    """
    allowed = list(allowed_roles)
    if not principal.has_any_role(allowed):
        roles_str = ", ".join(r.value for r in allowed)
        msg = error_message or (
            f"Role '{principal.role.value}' does not have one of required roles: {roles_str}"
        )
        raise AuthorizationError(msg, user_id=principal.user_id)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

class PrincipalResolver:
    """Builds a Principal from the stored role and category assignments."""

    def __init__(self, db: "Session"):
        self.roles = UserRoleRepository(db)
        self.assignments = AdminCategoryAssignmentRepository(db)

    def resolve(self, user_id: str) -> Optional[Principal]:
        """
        Resolve ``user_id`` into a Principal.

        Returns:
            The principal, or None for users without a role row
        """
        role = self.roles.get_role(user_id)
        if role is None:
            return None

        category_ids: FrozenSet[str] = frozenset()
        if role == UserRole.CATEGORY_ADMIN:
            category_ids = frozenset(self.assignments.category_ids_for(user_id))

        return Principal(user_id=user_id, role=role, category_ids=category_ids)


__all__ = [
    "Principal",
    "PrincipalResolver",
    "can_read",
    "can_read_ref",
    "can_write",
    "can_manage_category",
    "can_delete_note",
    "can_send_message",
    "is_staff",
    "is_super_admin",
    "require_read",
    "require_write",
    "require_role",
]
