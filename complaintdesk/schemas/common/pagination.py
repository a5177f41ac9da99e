# --- File: complaintdesk/schemas/common/pagination.py ---
"""
Pagination schemas for page-based responses.
"""

from __future__ import annotations

import math
from typing import Generic, List, TypeVar

from pydantic import Field, computed_field

from complaintdesk.config.settings import settings
from complaintdesk.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = [
    "PaginationParams",
    "PaginatedResponse",
]


class PaginationParams(BaseSchema):
    """Pagination query parameters."""

    page: int = Field(
        default=1,
        ge=1,
        description="Page number (1-indexed)",
    )
    page_size: int = Field(
        default=settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Items per page",
    )

    @computed_field  # type: ignore[misc]
    @property
    def offset(self) -> int:
        """Calculate offset for database queries."""
        return (self.page - 1) * self.page_size


class PaginatedResponse(BaseSchema, Generic[T]):
    """One page of results plus totals."""

    items: List[T] = Field(default_factory=list)
    total_items: int = Field(..., ge=0, description="Total number of items")
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)

    @computed_field  # type: ignore[misc]
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size) if self.total_items else 0
