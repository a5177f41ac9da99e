"""
Translation of service results into HTTP responses.
"""

from typing import Dict, TypeVar

from fastapi import HTTPException, status

from complaintdesk.services.base import ErrorCode, ServiceResult

T = TypeVar("T")

STATUS_BY_ERROR_CODE: Dict[ErrorCode, int] = {
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.AUTHENTICATION_FAILED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.PROVISIONING_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def result_or_raise(result: ServiceResult[T]) -> T:
    """
    Return the data of a successful result, or raise the matching HTTPException.

    The failure's ServiceError is sent as the response detail; internal
    errors carry no details.
    """
    if result.is_success:
        return result.data

    error = result.error
    if error is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unknown error")

    status_code = STATUS_BY_ERROR_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = error.to_dict()
    if error.code == ErrorCode.INTERNAL_ERROR:
        # Raw exception text stays in the logs
        detail["details"] = None
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    raise HTTPException(status_code=status_code, detail=detail, headers=headers)
