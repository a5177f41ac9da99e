# complaintdesk/api/deps.py
"""
FastAPI dependencies: database session, change notifier and the calling
principal.

Example usage in a router:
    from fastapi import APIRouter, Depends
    from complaintdesk.api import deps

    router = APIRouter()

    @router.get("/me")
    def read_me(principal = Depends(deps.get_current_principal)):
        return principal
"""

from typing import Generator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from complaintdesk.core.events import ChangeNotifier, get_change_notifier
from complaintdesk.core.exceptions import AuthenticationError
from complaintdesk.core.logging import get_logger, user_id as user_id_context
from complaintdesk.db.session import SessionLocal
from complaintdesk.services.auth.security import extract_user_id
from complaintdesk.services.common.permissions import Principal, PrincipalResolver

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """Yield a session bound to SessionLocal and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_notifier() -> ChangeNotifier:
    return get_change_notifier()


def _unauthenticated(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def principal_from_token(token: str, db: Session) -> Principal:
    """
    Resolve an access token into a Principal.

    Raises:
        AuthenticationError: When the token is invalid or its user has no role
    """
    principal = PrincipalResolver(db).resolve(extract_user_id(token))
    if principal is None:
        raise AuthenticationError("User has no role assigned")
    return principal


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    """
    Resolve the bearer token into a Principal.

    Raises:
        HTTPException: 401 when the token is missing, invalid or belongs to
            a user without a role
    """
    if credentials is None:
        raise _unauthenticated("Not authenticated")

    try:
        principal = principal_from_token(credentials.credentials, db)
    except AuthenticationError as e:
        logger.warning(f"Rejected bearer token: {e.message}")
        raise _unauthenticated(e.message) from e

    user_id_context.set(principal.user_id)
    return principal


__all__ = [
    "bearer_scheme",
    "get_db",
    "get_notifier",
    "principal_from_token",
    "get_current_principal",
]
