"""
Authentication endpoints: student self-registration and password login.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from complaintdesk.api import deps
from complaintdesk.api.responses import result_or_raise
from complaintdesk.schemas.auth import LoginRequest, StudentRegister, TokenResponse
from complaintdesk.services.auth.auth_service import AuthService
from complaintdesk.services.common.permissions import Principal

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(payload: StudentRegister, db: Session = Depends(deps.get_db)) -> TokenResponse:
    return result_or_raise(AuthService(db).register_student(payload))


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(deps.get_db)) -> TokenResponse:
    return result_or_raise(AuthService(db).login(payload))


@router.get("/me")
def read_me(principal: Principal = Depends(deps.get_current_principal)) -> dict:
    """Role and category scope of the caller."""
    return {
        "user_id": principal.user_id,
        "role": principal.role.value,
        "category_ids": sorted(principal.category_ids),
    }
