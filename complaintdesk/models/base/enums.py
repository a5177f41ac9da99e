"""
Database enums shared by the ORM models and the API schemas.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    STUDENT = "student"
    CATEGORY_ADMIN = "category_admin"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class Priority(str, enum.Enum):
    """Complaint priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ComplaintStatus(str, enum.Enum):
    """Complaint lifecycle status; the first six values are ordered stages."""
    PENDING = "pending"
    VERIFIED = "verified"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"
    REJECTED = "rejected"


class ChangeType(str, enum.Enum):
    """History entry types recorded by the complaint ledger."""
    CREATED = "created"
    STATUS_CHANGE = "status_change"
    PRIORITY_CHANGE = "priority_change"


STAFF_ROLES = frozenset({UserRole.CATEGORY_ADMIN, UserRole.ADMIN, UserRole.SUPER_ADMIN})
GLOBAL_ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN})
