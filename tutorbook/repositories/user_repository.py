# tutorbook/repositories/user_repository.py
"""
User Repository for the TutorBook Platform

Handles User data access: lookups by id and email, and role-checked
lookups used when a booking or doubt names its counterpart.
"""

import logging
from typing import Optional, cast

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class DuplicateUserEmailError(RepositoryException):
    """Another user already holds this email."""


class UserRepository(BaseRepository[User]):
    """Repository for User data access."""

    def __init__(self, db: Session):
        """Initialize with User model."""
        super().__init__(db, User)
        self.logger = logging.getLogger(__name__)

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email, case-insensitively.

        Used by: AuthService for login and duplicate checks
        """
        try:
            normalized = (email or "").strip().lower()
            return cast(
                Optional[User],
                self.db.query(User).filter(func.lower(User.email) == normalized).first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user by email {email}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve user by email: {str(e)}")

    def email_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def get_with_role(self, user_id: str, role: str) -> Optional[User]:
        """
        Get an active user only if they hold the given role.

        Used by: BookingService and DoubtService to validate counterparts
        """
        try:
            return cast(
                Optional[User],
                self.db.query(User)
                .filter(User.id == user_id, User.role == role, User.is_active.is_(True))
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting {role} {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve user: {str(e)}")

    def create_user(self, **kwargs) -> User:
        """
        Insert a user row.

        A unique violation caused by a concurrent registration of the same
        email rolls back the session and is reported as DuplicateUserEmailError.
        """
        try:
            user = User(**kwargs)
            self.db.add(user)
            self.db.flush()
            return user
        except IntegrityError as e:
            self.db.rollback()
            if self.get_by_email(kwargs.get("email", "")) is not None:
                self.logger.info(f"Duplicate registration for {kwargs.get('email')}: {e}")
                raise DuplicateUserEmailError(f"Email already registered: {e}") from e
            self.logger.error(f"Integrity error creating user: {e}")
            raise RepositoryException(f"Failed to create user: {e}") from e
