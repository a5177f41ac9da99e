"""
Staff management: category admin provisioning, roles and category scope.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from complaintdesk.api import deps
from complaintdesk.api.responses import result_or_raise
from complaintdesk.schemas.admin import (
    AdminCategoriesUpdate,
    AdminSummary,
    CategoryAdminCreate,
    CategoryAdminCreated,
    RoleUpdate,
    UserSummary,
)
from complaintdesk.services.admin import AdminProvisioningService, RoleService
from complaintdesk.services.common.permissions import Principal

router = APIRouter(tags=["Admin Management"])


@router.post("/admins", response_model=CategoryAdminCreated, status_code=status.HTTP_201_CREATED)
def create_category_admin(
    payload: CategoryAdminCreate,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> CategoryAdminCreated:
    return result_or_raise(AdminProvisioningService(db).create_category_admin(principal, payload))


@router.get("/admins", response_model=List[AdminSummary])
def list_admins(
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> List[AdminSummary]:
    return result_or_raise(RoleService(db).list_admins(principal))


@router.get("/users", response_model=List[UserSummary])
def list_users(
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> List[UserSummary]:
    return result_or_raise(RoleService(db).list_users(principal))


@router.put("/admins/{admin_id}/categories", response_model=AdminSummary)
def set_admin_categories(
    admin_id: str,
    payload: AdminCategoriesUpdate,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> AdminSummary:
    return result_or_raise(RoleService(db).set_admin_categories(principal, admin_id, payload.category_ids))


@router.delete("/admins/{admin_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_admin(
    admin_id: str,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> Response:
    result_or_raise(RoleService(db).remove_admin(principal, admin_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/users/{user_id}/role", response_model=AdminSummary)
def set_user_role(
    user_id: str,
    payload: RoleUpdate,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db),
) -> AdminSummary:
    return result_or_raise(RoleService(db).set_role(principal, user_id, payload.role))
