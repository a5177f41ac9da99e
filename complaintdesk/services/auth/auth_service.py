"""
Student self-registration and password login.
"""

from typing import Optional

from sqlalchemy.orm import Session

from complaintdesk.config.settings import settings
from complaintdesk.core.exceptions import AuthenticationError, ValidationError
from complaintdesk.models.base.enums import UserRole
from complaintdesk.repositories.user import UserRoleRepository
from complaintdesk.schemas.auth import LoginRequest, StudentRegister, TokenResponse
from complaintdesk.services.auth.identity_provider import IdentityProvider
from complaintdesk.services.auth.security import create_access_token
from complaintdesk.services.base import BaseService, ServiceResult


class AuthService(BaseService[None, UserRoleRepository]):
    """Issues access tokens for identities held by the IdentityProvider."""

    def __init__(self, db_session: Session, identity_provider: Optional[IdentityProvider] = None):
        super().__init__(UserRoleRepository(db_session), db_session)
        self.identities = identity_provider or IdentityProvider(db_session)

    def _issue(self, user_id: str, role: UserRole) -> TokenResponse:
        return TokenResponse(
            access_token=create_access_token(user_id, role=role.value),
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user_id=user_id,
            role=role,
        )

    def register_student(self, request: StudentRegister) -> ServiceResult[TokenResponse]:
        """Create a student identity with the student role and sign it in."""
        try:
            if len(request.password) < settings.MIN_PASSWORD_LENGTH:
                raise ValidationError(
                    f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters",
                    field="password",
                )

            user = self.identities.create_identity(request.name, request.email, request.password)
            try:
                with self.transaction():
                    self.repository.set_role(user.id, UserRole.STUDENT)
            except Exception:
                self.identities.delete_identity(user.id)
                raise

            self._log_operation("Student registered", user.id)
            return ServiceResult.success(self._issue(user.id, UserRole.STUDENT))
        except Exception as e:
            return self._handle_exception(e, "register student", request.email)

    def login(self, request: LoginRequest) -> ServiceResult[TokenResponse]:
        try:
            user = self.identities.authenticate(request.email, request.password)
            if user is None:
                raise AuthenticationError("Invalid email or password")

            role = self.repository.get_role(user.id)
            if role is None:
                raise AuthenticationError("Account has no role assigned")

            return ServiceResult.success(self._issue(user.id, role))
        except Exception as e:
            return self._handle_exception(e, "log in", request.email)
