"""
Authentication schemas.
"""

from pydantic import EmailStr, Field

from complaintdesk.models.base.enums import UserRole
from complaintdesk.schemas.common.base import BaseCreateSchema, BaseSchema

__all__ = ["StudentRegister", "LoginRequest", "TokenResponse"]


class StudentRegister(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(BaseCreateSchema):
    email: EmailStr
    password: str


class TokenResponse(BaseSchema):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user_id: str
    role: UserRole
