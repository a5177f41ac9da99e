# complaintdesk/services/auth/security.py
"""
Password hashing and access token helpers.
"""
from __future__ import annotations

import hashlib
from datetime import timedelta
from typing import Any, Optional

import bcrypt
import jwt

from complaintdesk.config.settings import settings
from complaintdesk.core.exceptions import AuthenticationError, ValidationError
from complaintdesk.core.utils import utcnow


def _prepare_password_for_bcrypt(password: str) -> bytes:
    """
    Bring a password within bcrypt's 72-byte input limit.

    Longer passwords are reduced to their SHA-256 hex digest.
    """
    encoded = password.encode("utf-8")
    if len(encoded) > 71:
        return hashlib.sha256(encoded).hexdigest().encode("ascii")
    return encoded


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a plaintext password using bcrypt.

    Raises:
        ValidationError: If password is empty
    """
    if not password:
        raise ValidationError("Password cannot be empty", field="password")

    salt = bcrypt.gensalt(rounds=rounds or settings.PASSWORD_BCRYPT_ROUNDS)
    return bcrypt.hashpw(_prepare_password_for_bcrypt(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plaintext password against a stored hash."""
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            _prepare_password_for_bcrypt(plain_password),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(
    subject: str,
    *,
    role: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[dict[str, Any]] = None,
) -> str:
    """
    Create a signed JWT access token whose ``sub`` is the user id.

    The role claim is informational only; authorization always resolves
    the role from the store.
    """
    now = utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    payload: dict[str, Any] = {
        "sub": str(subject),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
        "type": "access",
    }
    if role:
        payload["role"] = role
    if additional_claims:
        payload.update(additional_claims)

    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate an access token.

    Raises:
        AuthenticationError: If the token is expired, malformed or not an access token
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid or malformed token") from exc

    if payload.get("type") != "access" or not payload.get("sub"):
        raise AuthenticationError("Invalid token claims")
    return payload


def extract_user_id(token: str) -> str:
    """Return the ``sub`` claim of a valid access token."""
    return str(decode_token(token)["sub"])
