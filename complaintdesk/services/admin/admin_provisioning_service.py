"""
Category admin provisioning.

Provisioning spans two systems: the identity is committed by the
IdentityProvider first, then the role and category assignments are
written in one transaction. If that second step fails the identity is
deleted again so no orphaned account remains.
"""

from typing import Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from complaintdesk.config.settings import settings
from complaintdesk.core.exceptions import ProvisioningError, ValidationError
from complaintdesk.models.base.enums import GLOBAL_ADMIN_ROLES, UserRole
from complaintdesk.models.user import User
from complaintdesk.repositories.category import (
    AdminCategoryAssignmentRepository,
    CategoryRepository,
)
from complaintdesk.repositories.user import UserRoleRepository
from complaintdesk.schemas.admin import CategoryAdminCreate, CategoryAdminCreated
from complaintdesk.services.auth.identity_provider import IdentityProvider
from complaintdesk.services.base import BaseService, ServiceResult
from complaintdesk.services.common.permissions import Principal, require_role


class AdminProvisioningService(BaseService[User, UserRoleRepository]):

    def __init__(self, db_session: Session, identity_provider: Optional[IdentityProvider] = None):
        super().__init__(UserRoleRepository(db_session), db_session)
        self.identities = identity_provider or IdentityProvider(db_session)
        self.categories = CategoryRepository(db_session)
        self.assignments = AdminCategoryAssignmentRepository(db_session)

    def _validate(self, request: CategoryAdminCreate) -> str:
        """Check the request and return the normalized email."""
        if not request.name:
            raise ValidationError("Name is required", field="name")

        try:
            email = validate_email(request.email, check_deliverability=False).normalized
        except EmailNotValidError as e:
            raise ValidationError(f"Invalid email address: {e}", field="email") from e

        if len(request.password or "") < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters",
                field="password",
            )

        if not request.category_ids:
            raise ValidationError("At least one category is required", field="category_ids")

        missing = self.categories.find_missing_ids(request.category_ids)
        if missing:
            raise ValidationError(
                f"Unknown categories: {', '.join(sorted(missing))}",
                field="category_ids",
            )

        if self.identities.email_taken(email):
            raise ValidationError("A user with this email already exists", field="email")
        return email

    def create_category_admin(
        self,
        principal: Principal,
        request: CategoryAdminCreate,
    ) -> ServiceResult[CategoryAdminCreated]:
        """
        Create an identity with the category_admin role and its scope.

        Returns:
            The new identity's id, email and name, or a failure naming the
            step that failed
        """
        try:
            require_role(principal, GLOBAL_ADMIN_ROLES)
            email = self._validate(request)

            try:
                user = self.identities.create_identity(request.name, email, request.password)
            except Exception as e:
                raise ProvisioningError("create_identity", f"Failed to create user: {e}") from e

            step = "assign_role"
            try:
                with self.transaction():
                    self.repository.set_role(user.id, UserRole.CATEGORY_ADMIN)
                    step = "assign_categories"
                    self.assignments.assign(user.id, request.category_ids, assigned_by=principal.user_id)
            except Exception as e:
                self._discard_identity(user.id)
                raise ProvisioningError(step, f"Failed to {step.replace('_', ' ')}: {e}") from e

            self._log_operation(
                "Category admin provisioned",
                user.id,
                {"categories": len(set(request.category_ids))},
            )
            return ServiceResult.success(
                CategoryAdminCreated(id=user.id, email=user.email, name=user.name),
                message="Category admin created",
            )
        except Exception as e:
            return self._handle_exception(e, "create category admin", request.email)

    def _discard_identity(self, user_id: str) -> None:
        try:
            self.identities.delete_identity(user_id)
        except Exception:
            self._logger.error(
                "Could not delete identity after failed provisioning",
                exc_info=True,
                extra={"identity_id": user_id},
            )
            raise
