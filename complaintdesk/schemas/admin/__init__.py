from complaintdesk.schemas.admin.admin import (
    AdminCategoriesUpdate,
    AdminSummary,
    CategoryAdminCreate,
    CategoryAdminCreated,
    CategoryRef,
    RoleUpdate,
    UserSummary,
)

__all__ = [
    "CategoryAdminCreate",
    "CategoryAdminCreated",
    "CategoryRef",
    "AdminSummary",
    "RoleUpdate",
    "AdminCategoriesUpdate",
    "UserSummary",
]
