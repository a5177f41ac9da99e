"""
Role and admin scope management.
"""

from typing import List

from sqlalchemy.orm import Session

from complaintdesk.core.exceptions import (
    AuthorizationError,
    ResourceNotFoundError,
    ValidationError,
)
from complaintdesk.models.base.enums import GLOBAL_ADMIN_ROLES, STAFF_ROLES, UserRole
from complaintdesk.models.user import User
from complaintdesk.repositories.category import (
    AdminCategoryAssignmentRepository,
    CategoryRepository,
)
from complaintdesk.repositories.user import UserRepository, UserRoleRepository
from complaintdesk.schemas.admin import AdminSummary, CategoryRef, UserSummary
from complaintdesk.services.base import BaseService, ServiceResult
from complaintdesk.services.common.permissions import Principal, require_role


class RoleService(BaseService[User, UserRoleRepository]):
    """
    Promotion, demotion and category scope of staff accounts.

    Only category admins carry category assignments; moving a user to any
    other role clears them.
    """

    def __init__(self, db_session: Session):
        super().__init__(UserRoleRepository(db_session), db_session)
        self.users = UserRepository(db_session)
        self.categories = CategoryRepository(db_session)
        self.assignments = AdminCategoryAssignmentRepository(db_session)

    def _load_user(self, user_id: str) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        return user

    def _category_refs(self, user_id: str) -> List[CategoryRef]:
        return sorted(
            (CategoryRef(id=a.category.id, name=a.category.name) for a in self.assignments.find_by_admin(user_id)),
            key=lambda ref: ref.name.lower(),
        )

    def _summary(self, user: User, role: UserRole) -> AdminSummary:
        return AdminSummary(
            id=user.id, name=user.name, email=user.email, role=role, categories=self._category_refs(user.id)
        )

    def set_role(self, principal: Principal, user_id: str, role: UserRole) -> ServiceResult[AdminSummary]:
        """Change a user's role (super admins only)."""
        try:
            require_role(principal, [UserRole.SUPER_ADMIN])
            if user_id == principal.user_id:
                raise ValidationError("You cannot change your own role", field="user_id")
            user = self._load_user(user_id)

            with self.transaction():
                self.repository.set_role(user.id, role)
                if role != UserRole.CATEGORY_ADMIN:
                    self.assignments.delete_for_admin(user.id)
            self.db.expire(user)

            self._log_operation("Role changed", user.id, {"role": role.value})
            return ServiceResult.success(self._summary(user, role), message="Role updated")
        except Exception as e:
            return self._handle_exception(e, "set role", user_id)

    def list_admins(self, principal: Principal) -> ServiceResult[List[AdminSummary]]:
        """Every staff account with the categories in its scope."""
        try:
            require_role(principal, GLOBAL_ADMIN_ROLES)
            roles = {row.user_id: row.role for row in self.repository.find_by_roles(STAFF_ROLES)}
            users = self.users.find_by_ids(roles.keys())
            summaries = [self._summary(user, roles[user.id]) for user in users]
            summaries.sort(key=lambda s: (s.name.lower(), s.id))
            return ServiceResult.success(summaries)
        except Exception as e:
            return self._handle_exception(e, "list admins")

    def list_users(self, principal: Principal) -> ServiceResult[List[UserSummary]]:
        """
        Every account with its role, for the global admin user directory.

        Users without a role row are listed with ``role=None``. Only category
        admins carry categories.
        """
        try:
            require_role(principal, GLOBAL_ADMIN_ROLES)
            roles = self.repository.role_map()
            summaries = []
            for user in self.users.find_all():
                role = roles.get(user.id)
                refs = self._category_refs(user.id) if role == UserRole.CATEGORY_ADMIN else []
                summaries.append(
                    UserSummary(id=user.id, name=user.name, email=user.email, role=role, categories=refs)
                )
            summaries.sort(key=lambda s: (s.name.lower(), s.id))
            return ServiceResult.success(summaries)
        except Exception as e:
            return self._handle_exception(e, "list users")

    def set_admin_categories(
        self,
        principal: Principal,
        admin_id: str,
        category_ids: List[str],
    ) -> ServiceResult[AdminSummary]:
        """Replace a category admin's scope."""
        try:
            require_role(principal, GLOBAL_ADMIN_ROLES)
            user = self._load_user(admin_id)
            if self.repository.get_role(user.id) != UserRole.CATEGORY_ADMIN:
                raise ValidationError("Only category admins have category scope", field="admin_id")
            if not category_ids:
                raise ValidationError("At least one category is required", field="category_ids")
            missing = self.categories.find_missing_ids(category_ids)
            if missing:
                raise ValidationError(
                    f"Unknown categories: {', '.join(sorted(missing))}",
                    field="category_ids",
                )

            with self.transaction():
                self.assignments.delete_for_admin(user.id)
                self.assignments.assign(user.id, category_ids, assigned_by=principal.user_id)
            self.db.expire(user)

            self._log_operation("Admin scope replaced", user.id, {"categories": len(set(category_ids))})
            return ServiceResult.success(self._summary(user, UserRole.CATEGORY_ADMIN), message="Categories updated")
        except Exception as e:
            return self._handle_exception(e, "set admin categories", admin_id)

    def remove_admin(self, principal: Principal, admin_id: str) -> ServiceResult[bool]:
        """Strip a staff account back to student and clear its scope."""
        try:
            require_role(principal, GLOBAL_ADMIN_ROLES)
            if admin_id == principal.user_id:
                raise ValidationError("You cannot remove yourself", field="admin_id")
            user = self._load_user(admin_id)

            role = self.repository.get_role(user.id)
            if role not in STAFF_ROLES:
                raise ValidationError("User is not an admin", field="admin_id")
            if role == UserRole.SUPER_ADMIN and not principal.has_role(UserRole.SUPER_ADMIN):
                raise AuthorizationError(
                    "Only a super admin can remove a super admin",
                    action="remove_admin",
                    user_id=principal.user_id,
                )

            with self.transaction():
                self.assignments.delete_for_admin(user.id)
                self.repository.set_role(user.id, UserRole.STUDENT)
            self.db.expire(user)

            self._log_operation("Admin removed", user.id, {"previous_role": role.value})
            return ServiceResult.success(True, message="Admin removed")
        except Exception as e:
            return self._handle_exception(e, "remove admin", admin_id)
