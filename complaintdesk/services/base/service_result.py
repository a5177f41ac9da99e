"""
Outcome of a service call.

Services never raise into their callers: every public method returns a
ServiceResult that either carries data or a ServiceError whose code the
API layer maps onto an HTTP status.
"""

from dataclasses import dataclass, field as dataclass_field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from complaintdesk.core.utils import utcnow


class ErrorCode(str, Enum):
    """Failure kinds a service can report."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"

    # Lifecycle move not allowed from the current status
    INVALID_STATE = "INVALID_STATE"

    UNAUTHORIZED = "UNAUTHORIZED"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"

    # Category admin provisioning failed part way and was undone
    PROVISIONING_FAILED = "PROVISIONING_FAILED"


class ErrorSeverity(str, Enum):
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class ServiceError:
    code: ErrorCode
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    details: Optional[Dict[str, Any]] = None
    field: Optional[str] = None
    timestamp: datetime = dataclass_field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details,
            "field": self.field,
            "timestamp": self.timestamp.isoformat(),
        }


TData = TypeVar("TData")


@dataclass
class ServiceResult(Generic[TData]):
    """
    Success or failure of one service operation.

    Attributes:
        is_success: Whether the operation went through
        data: Payload of a successful operation
        error: Failure description
        message: Short human-readable outcome
        metadata: Extra facts about the outcome, e.g. ``{"replayed": True}``
            for a create answered from an idempotency key
    """

    is_success: bool
    data: Optional[TData] = None
    error: Optional[ServiceError] = None
    message: Optional[str] = None
    metadata: Dict[str, Any] = dataclass_field(default_factory=dict)

    @classmethod
    def success(
        cls,
        data: Optional[TData] = None,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        return cls(is_success=True, data=data, message=message, metadata=metadata or {})

    @classmethod
    def failure(cls, error: ServiceError) -> "ServiceResult[TData]":
        return cls(is_success=False, error=error, message=error.message)

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error else None

    def unwrap(self) -> TData:
        """
        Return the data of a successful result.

        Raises:
            ValueError: If the result is a failure
        """
        if not self.is_success:
            raise ValueError(f"Cannot unwrap failed result: {self.message}")
        return self.data

    def __bool__(self) -> bool:
        return self.is_success


__all__ = [
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
