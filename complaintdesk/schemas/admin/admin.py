"""
Admin management and provisioning schemas.
"""

from typing import List, Optional

from pydantic import Field

from complaintdesk.models.base.enums import UserRole
from complaintdesk.schemas.common.base import BaseCreateSchema, BaseSchema, BaseUpdateSchema

__all__ = [
    "CategoryAdminCreate",
    "CategoryAdminCreated",
    "CategoryRef",
    "AdminSummary",
    "RoleUpdate",
    "AdminCategoriesUpdate",
]


class CategoryAdminCreate(BaseCreateSchema):
    """
    Request to provision a category admin account.

    Email format, password length and the category list are checked by
    the provisioning service, which reports them as validation failures.
    """

    name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    password: str
    category_ids: List[str] = Field(default_factory=list)


class CategoryAdminCreated(BaseSchema):
    id: str
    email: str
    name: str


class CategoryRef(BaseSchema):
    id: str
    name: str


class AdminSummary(BaseSchema):
    """Staff member with the categories in scope."""

    id: str
    name: str
    email: str
    role: UserRole
    categories: List[CategoryRef] = Field(default_factory=list)


class UserSummary(BaseSchema):
    """Any account with its role, None when it has no role row."""

    id: str
    name: str
    email: str
    role: Optional[UserRole] = None
    categories: List[CategoryRef] = Field(default_factory=list)


class RoleUpdate(BaseUpdateSchema):
    role: UserRole


class AdminCategoriesUpdate(BaseUpdateSchema):
    category_ids: List[str] = Field(default_factory=list)
