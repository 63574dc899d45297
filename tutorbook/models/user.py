# tutorbook/models/user.py
"""
User model for the TutorBook platform.

This module defines the User model which serves as the base for both
tutors and students in the system. Tutors additionally own a
TutorProfile (see tutorbook.models.tutor).

Classes:
    User: Main user model for authentication and role management
"""

from datetime import datetime, timezone
import logging
from typing import Any, Dict

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, String
from sqlalchemy.orm import relationship
import ulid

from ..core.enums import RoleName
from ..database import Base

logger = logging.getLogger(__name__)


class User(Base):
    """
    Main user model for authentication and profile management.

    Both tutors and students are represented by this model, differentiated
    by the role field. The role is fixed at registration.

    Attributes:
        id: ULID primary key
        name: Display name
        email: Unique email address used for login (stored lower-cased)
        hashed_password: Bcrypt hashed password
        role: "student" or "tutor"
        phone: Optional phone number
        is_active: Whether the user account may sign in
        created_at: Account creation timestamp
        updated_at: Last update timestamp

    Relationships:
        tutor_profile: One-to-one with TutorProfile (tutors only)
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, index=True)
    phone = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(DateTime(timezone=True), onupdate=lambda: datetime.now(timezone.utc))

    tutor_profile = relationship(
        "TutorProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("role IN ('student', 'tutor')", name="ck_users_role"),
    )

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email} ({self.role})>"

    @property
    def is_tutor(self) -> bool:
        return self.role == RoleName.TUTOR.value

    @property
    def is_student(self) -> bool:
        return self.role == RoleName.STUDENT.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging and debugging (no password hash)."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "phone": self.phone,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
