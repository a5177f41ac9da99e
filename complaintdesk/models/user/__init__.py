from complaintdesk.models.user.user import User, UserRole

__all__ = ["User", "UserRole"]
