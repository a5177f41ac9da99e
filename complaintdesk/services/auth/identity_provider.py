"""
Identity provider.

Owns identity records (profile rows with credentials). Identity writes
commit on their own, independently of any business transaction, so
callers that build on a new identity must delete it again when their
own work fails.
"""

from typing import Optional

from sqlalchemy.orm import Session

from complaintdesk.core.exceptions import DuplicateEntryError
from complaintdesk.core.logging import get_logger
from complaintdesk.models.user.user import User
from complaintdesk.repositories.user import UserRepository
from complaintdesk.services.auth.security import hash_password, verify_password

logger = get_logger(__name__)


class IdentityProvider:

    def __init__(self, db: Session, bcrypt_rounds: Optional[int] = None):
        self.db = db
        self.users = UserRepository(db)
        self.bcrypt_rounds = bcrypt_rounds

    def email_taken(self, email: str) -> bool:
        return self.users.find_by_email(email) is not None

    def create_identity(self, name: str, email: str, password: str) -> User:
        """
        Create and commit an identity.

        Raises:
            DuplicateEntryError: If the email is already registered
        """
        email = email.strip().lower()
        if self.email_taken(email):
            raise DuplicateEntryError(f"A user with email {email} already exists")

        user = User(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password, rounds=self.bcrypt_rounds),
        )
        self.users.create(user, commit=True)
        logger.info("Identity created", extra={"identity_id": user.id})
        return user

    def delete_identity(self, user_id: str) -> bool:
        """
        Delete an identity and everything that cascades from it.

        Returns:
            False when the identity no longer exists
        """
        user = self.users.find_by_id(user_id)
        if user is None:
            return False
        self.users.delete(user, commit=True)
        logger.info("Identity deleted", extra={"identity_id": user_id})
        return True

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user for valid credentials, else None."""
        user = self.users.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user
