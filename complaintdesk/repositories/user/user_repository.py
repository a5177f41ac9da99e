"""
User and role repositories.
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaintdesk.core.exceptions import RepositoryError
from complaintdesk.models.base.enums import UserRole as Role
from complaintdesk.models.user.user import User, UserRole
from complaintdesk.repositories.base.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Identity records."""

    def __init__(self, session: Session):
        super().__init__(User, session)

    def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by email."""
        try:
            query = select(User).where(func.lower(User.email) == email.strip().lower())
            return self.db.execute(query).scalars().first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"User lookup failed: {str(e)}") from e

    def find_by_ids(self, user_ids: Iterable[str]) -> List[User]:
        ids = set(user_ids)
        if not ids:
            return []
        return self.find_by_criteria({"id": ids})

    def find_all(self) -> List[User]:
        return self.find_by_criteria({}, order_by=["name"])


class UserRoleRepository(BaseRepository[UserRole]):
    """One role row per user."""

    def __init__(self, session: Session):
        super().__init__(UserRole, session)

    def find_by_user(self, user_id: str) -> Optional[UserRole]:
        return self.find_one_by_criteria({"user_id": user_id})

    def get_role(self, user_id: str) -> Optional[Role]:
        """Role of a user, or None when the user has no role row."""
        row = self.find_by_user(user_id)
        return row.role if row else None

    def set_role(self, user_id: str, role: Role) -> UserRole:
        """Create or replace the role of a user."""
        row = self.find_by_user(user_id)
        if row is None:
            return self.create(UserRole(user_id=user_id, role=role))
        return self.update(row, {"role": role})

    def find_by_roles(self, roles: Iterable[Role]) -> List[UserRole]:
        """Role rows whose role is one of ``roles``."""
        return self.find_by_criteria({"role": list(roles)}, order_by=["created_at"])

    def role_map(self) -> Dict[str, Role]:
        """Role of every user that has a role row, keyed by user id."""
        return {row.user_id: row.role for row in self.find_by_criteria({})}
