"""
User repositories package.
"""

from complaintdesk.repositories.user.user_repository import UserRepository, UserRoleRepository

__all__ = ["UserRepository", "UserRoleRepository"]
