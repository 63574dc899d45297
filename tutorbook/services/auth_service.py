# tutorbook/services/auth_service.py
"""
Authentication Service for the TutorBook Platform

Handles registration (with the tutor profile for tutors), credential
checks, and issuing access tokens.
"""

from decimal import Decimal, InvalidOperation
import logging
from typing import List, Optional, Union

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from ..auth import DUMMY_HASH_FOR_TIMING_ATTACK, create_access_token, get_password_hash
from ..auth import verify_password
from ..core.config import settings
from ..core.enums import RoleName
from ..core.exceptions import (
    DuplicateEmailException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from ..models.tutor import TutorProfile
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import DuplicateUserEmailError, UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AuthService(BaseService):
    """Service layer for registration and authentication."""

    def __init__(self, db: Session, user_repository: Optional[UserRepository] = None):
        """
        Initialize auth service.

        Args:
            db: Database session
            user_repository: Optional UserRepository instance
        """
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("register_user")
    def register_user(
        self,
        name: str,
        email: str,
        password: str,
        role: str,
        phone: Optional[str] = None,
        subjects: Optional[List[str]] = None,
        bio: Optional[str] = None,
        experience: Optional[int] = None,
        hourly_rate: Optional[Union[Decimal, float, str]] = None,
    ) -> User:
        """
        Register a new user.

        Tutors get a TutorProfile created in the same transaction.

        Args:
            name: Display name
            email: Email address, unique case-insensitively
            password: Plain text password (will be hashed)
            role: "student" or "tutor"
            phone: Optional phone number
            subjects: Tutor only, subjects taught
            bio: Tutor only, profile text
            experience: Tutor only, years of experience
            hourly_rate: Tutor only, advertised rate

        Returns:
            Created user object

        Raises:
            ValidationException: If data is invalid
            DuplicateEmailException: If email already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationException("Name is required")
        email = self._normalize_email(email)
        if not password or len(password) < settings.min_password_length:
            raise ValidationException(
                f"Password must be at least {settings.min_password_length} characters"
            )
        valid_roles = {r.value for r in RoleName}
        if role not in valid_roles:
            raise ValidationException("Role must be either student or tutor")

        if role == RoleName.TUTOR.value:
            if experience is not None and experience < 0:
                raise ValidationException("Experience must not be negative")
            try:
                rate = Decimal(str(hourly_rate)) if hourly_rate is not None else Decimal("0")
            except InvalidOperation:
                raise ValidationException("Hourly rate must be a number")
            if rate < 0:
                raise ValidationException("Hourly rate must not be negative")

        self.log_operation("register_user", email=email, role=role)

        if self.user_repository.email_exists(email):
            self.logger.warning(f"Registration failed - email already exists: {email}")
            raise DuplicateEmailException(email)

        hashed_password = get_password_hash(password)

        with self.transaction():
            try:
                user = self.user_repository.create_user(
                    name=name,
                    email=email,
                    hashed_password=hashed_password,
                    role=role,
                    phone=(phone or "").strip() or None,
                )
            except DuplicateUserEmailError as exc:
                raise DuplicateEmailException(email) from exc
            if role == RoleName.TUTOR.value:
                profile = TutorProfile(
                    user_id=user.id,
                    bio=(bio or "").strip() or None,
                    years_experience=experience or 0,
                    hourly_rate=rate,
                )
                profile.set_subjects(subjects or [])
                self.db.add(profile)
                self.db.flush()
            user_id = user.id

        self.logger.info(f"Registered {role} {user_id}")
        return self.get_user(user_id)

    @BaseService.measure_operation("authenticate_user")
    def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user by email and password.

        Unknown emails still run a bcrypt verification so response time does
        not reveal which addresses are registered.

        Raises:
            UnauthorizedException: If the credentials do not match an active user
        """
        self.logger.info(f"Authentication attempt for user: {email}")

        user = self.user_repository.get_by_email(email or "")
        if not user:
            verify_password(password or "", DUMMY_HASH_FOR_TIMING_ATTACK)
            self.logger.warning(f"Authentication failed - user not found: {email}")
            raise UnauthorizedException(INVALID_CREDENTIALS_MESSAGE)

        if not verify_password(password or "", user.hashed_password):
            self.logger.warning(f"Authentication failed - incorrect password: {email}")
            raise UnauthorizedException(INVALID_CREDENTIALS_MESSAGE)

        if not user.is_active:
            self.logger.warning(f"Authentication failed - account deactivated: {email}")
            raise UnauthorizedException(INVALID_CREDENTIALS_MESSAGE)

        self.logger.info(f"Successful authentication for user: {email}")
        return user

    def create_token_for(self, user: User) -> str:
        """Issue an access token identifying the user and their role."""
        return create_access_token({"sub": user.id, "role": user.role})

    @BaseService.measure_operation("get_user")
    def get_user(self, user_id: str) -> User:
        user = self.user_repository.get_by_id(user_id)
        if not user:
            raise NotFoundException("User not found")
        return user

    @staticmethod
    def _normalize_email(email: Optional[str]) -> str:
        if not email or not email.strip():
            raise ValidationException("Email is required")
        try:
            validated = validate_email(email.strip(), check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValidationException("Invalid email address", details={"email": email}) from exc
        return validated.normalized.lower()
