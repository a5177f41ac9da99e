"""
Category endpoints. Anyone signed in may list; admins manage.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from complaintdesk.api import deps
from complaintdesk.api.responses import result_or_raise
from complaintdesk.core.events import ChangeNotifier
from complaintdesk.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from complaintdesk.services.category import CategoryService
from complaintdesk.services.common.permissions import Principal

router = APIRouter(prefix="/categories", tags=["Categories"])


def get_category_service(
    db: Session = Depends(deps.get_db),
    notifier: ChangeNotifier = Depends(deps.get_notifier),
) -> CategoryService:
    return CategoryService(db, notifier)


@router.get("", response_model=List[CategoryResponse])
def list_categories(
    principal: Principal = Depends(deps.get_current_principal),
    service: CategoryService = Depends(get_category_service),
) -> List[CategoryResponse]:
    return result_or_raise(service.list_categories())


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    principal: Principal = Depends(deps.get_current_principal),
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    return result_or_raise(service.create(principal, payload.name))


@router.patch("/{category_id}", response_model=CategoryResponse)
def rename_category(
    category_id: str,
    payload: CategoryUpdate,
    principal: Principal = Depends(deps.get_current_principal),
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    return result_or_raise(service.rename(principal, category_id, payload.name))


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    principal: Principal = Depends(deps.get_current_principal),
    service: CategoryService = Depends(get_category_service),
) -> dict:
    """Delete a category; its complaints become uncategorized."""
    detached = result_or_raise(service.delete(principal, category_id))
    return {"deleted": True, "complaints_uncategorized": detached}
