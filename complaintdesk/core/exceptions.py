"""
Custom Exceptions for the Complaint Desk

This module defines the exception taxonomy raised by repositories and the
access/lifecycle rules, and mapped to ServiceResult failures by services.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Authentication & Authorization
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"
    TOKEN_INVALID = "TOKEN_INVALID"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TRANSITION = "INVALID_TRANSITION"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Provisioning
    PROVISIONING_FAILED = "PROVISIONING_FAILED"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        field: Optional[str] = None,
    ):
        details: Dict[str, Any] = {"field_errors": field_errors} if field_errors else {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details, 422)


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details, 404)


class ComplaintNotFoundError(ResourceNotFoundError):
    """Exception raised when a complaint is missing, including after a concurrent delete"""

    def __init__(self, complaint_id: Optional[str] = None):
        super().__init__("Complaint", complaint_id)


class AuthenticationError(BaseAppException):
    """Exception raised when the caller cannot be identified"""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, ErrorCode.AUTHENTICATION_FAILED, status_code=401)


class AuthorizationError(BaseAppException):
    """Exception raised when a principal lacks read or write scope"""

    def __init__(
        self,
        message: str = "Not authorized to perform this action",
        action: Optional[str] = None,
        user_id: Optional[str] = None,
    ):
        details = {"action": action, "user_id": user_id}
        self.action = action
        super().__init__(message, ErrorCode.AUTHORIZATION_FAILED, details, 403)


class InvalidTransitionError(BaseAppException):
    """Exception raised when a status move is not permitted by the lifecycle"""

    def __init__(self, current: str, requested: str, message: Optional[str] = None):
        message = message or f"Cannot move complaint from '{current}' to '{requested}'"
        self.current = current
        self.requested = requested
        super().__init__(
            message,
            ErrorCode.INVALID_TRANSITION,
            {"current_status": current, "requested_status": requested},
            409,
        )


class RepositoryError(BaseAppException):
    """Exception raised when a storage operation fails"""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, ErrorCode.DATABASE_ERROR, status_code=500)


class DuplicateEntryError(RepositoryError):
    """Exception raised when a unique constraint is violated"""

    def __init__(self, message: str = "Entry already exists"):
        super().__init__(message)
        self.error_code = ErrorCode.DUPLICATE_ENTRY
        self.status_code = 409


class ProvisioningError(BaseAppException):
    """Exception raised when provisioning a category admin fails part way"""

    def __init__(self, step: str, message: str):
        self.step = step
        super().__init__(message, ErrorCode.PROVISIONING_FAILED, {"step": step}, 500)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ValidationError",
    "ResourceNotFoundError",
    "ComplaintNotFoundError",
    "AuthenticationError",
    "AuthorizationError",
    "InvalidTransitionError",
    "RepositoryError",
    "DuplicateEntryError",
    "ProvisioningError",
]
