"""
User identity and role models.

A User row is the identity record (profile plus credentials); the role
lives in its own table so it can be changed independently.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from complaintdesk.models.base.base_model import BaseModel
from complaintdesk.models.base.enums import UserRole as UserRoleEnum
from complaintdesk.models.base.mixins import CreatedAtMixin
from complaintdesk.models.base.types import enum_values

if TYPE_CHECKING:
    from complaintdesk.models.category.admin_category_assignment import AdminCategoryAssignment

__all__ = ["User", "UserRole"]


class User(BaseModel, CreatedAtMixin):
    """
    Identity record for students and staff.

    Attributes:
        name: Display name
        email: Unique login email
        password_hash: bcrypt hash of the password
    """

    __tablename__ = "profiles"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Unique login email",
    )

    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="bcrypt password hash",
    )

    role: Mapped[Optional["UserRole"]] = relationship(
        "UserRole",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    category_assignments: Mapped[list["AdminCategoryAssignment"]] = relationship(
        "AdminCategoryAssignment",
        foreign_keys="AdminCategoryAssignment.admin_id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class UserRole(BaseModel, CreatedAtMixin):
    """One active role per user."""

    __tablename__ = "user_roles"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
        comment="User holding the role",
    )

    role: Mapped[UserRoleEnum] = mapped_column(
        Enum(UserRoleEnum, name="app_role", values_callable=enum_values),
        nullable=False,
        default=UserRoleEnum.STUDENT,
        comment="Active role",
    )

    user: Mapped["User"] = relationship("User", back_populates="role")

    def __repr__(self) -> str:
        return f"<UserRole(user_id={self.user_id}, role={self.role.value})>"
