"""
Category schemas.
"""

from pydantic import Field

from complaintdesk.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseUpdateSchema

__all__ = ["CategoryCreate", "CategoryUpdate", "CategoryResponse"]


class CategoryCreate(BaseCreateSchema):
    name: str = Field(..., max_length=100)


class CategoryUpdate(BaseUpdateSchema):
    name: str = Field(..., max_length=100)


class CategoryResponse(BaseResponseSchema):
    name: str
