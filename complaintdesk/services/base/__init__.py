"""
Service layer foundation: result type and base service.
"""

from complaintdesk.services.base.base_service import BaseService
from complaintdesk.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

__all__ = [
    "BaseService",
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
