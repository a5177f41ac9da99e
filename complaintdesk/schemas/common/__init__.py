from complaintdesk.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from complaintdesk.schemas.common.pagination import PaginatedResponse, PaginationParams

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
    "PaginationParams",
    "PaginatedResponse",
]
