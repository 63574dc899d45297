# tutorbook/models/tutor.py
"""
Tutor Profile model for the TutorBook platform.

This module defines the TutorProfile model which extends a tutor User
with teaching details, and the TutorSubject rows listing what they teach.

rating and total_sessions are derived aggregates: they are only written by
the feedback and completion paths and can always be recomputed from the
feedback and sessions tables.
"""

import logging
from typing import List

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


def normalize_subject(name: str) -> str:
    """Key used for case-insensitive exact subject matching."""
    return " ".join(name.split()).lower()


class TutorProfile(Base):
    """
    Model representing a tutor's public profile.

    Attributes:
        id: ULID primary key
        user_id: Foreign key to users table (one-to-one relationship)
        bio: Professional biography/description
        years_experience: Years of teaching experience
        hourly_rate: Advertised hourly rate
        is_available: Whether the tutor currently accepts new students
        rating: Mean of all student ratings, NULL while unrated
        rating_count: Number of ratings behind ``rating``
        total_sessions: Number of completed sessions

    Relationships:
        user: The User this profile belongs to
        subjects: Subjects this tutor teaches
    """

    __tablename__ = "tutor_profiles"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    bio = Column(Text, nullable=True)
    years_experience = Column(Integer, nullable=False, default=0)
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)

    # Derived aggregates
    rating = Column(Float, nullable=True)
    rating_count = Column(Integer, nullable=False, default=0)
    total_sessions = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="tutor_profile", lazy="joined")
    subjects = relationship(
        "TutorSubject",
        back_populates="tutor_profile",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TutorSubject.position",
    )

    __table_args__ = (
        CheckConstraint("years_experience >= 0", name="ck_tutor_profiles_experience"),
        CheckConstraint("hourly_rate >= 0", name="ck_tutor_profiles_rate"),
        CheckConstraint("total_sessions >= 0", name="ck_tutor_profiles_sessions"),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)",
            name="ck_tutor_profiles_rating_range",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<TutorProfile {self.id}: user={self.user_id}, rating={self.rating}, "
            f"sessions={self.total_sessions}>"
        )

    @property
    def subject_names(self) -> List[str]:
        return [subject.name for subject in self.subjects]

    def set_subjects(self, names: List[str]) -> None:
        """Replace the subject list, dropping blanks and case-insensitive duplicates."""
        seen: set[str] = set()
        rows: List[TutorSubject] = []
        for raw in names:
            name = " ".join((raw or "").split())
            key = normalize_subject(name)
            if not key or key in seen:
                continue
            seen.add(key)
            rows.append(TutorSubject(name=name, name_key=key, position=len(rows)))
        self.subjects = rows


class TutorSubject(Base):
    """One subject taught by a tutor."""

    __tablename__ = "tutor_subjects"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    tutor_profile_id = Column(
        String(26),
        ForeignKey("tutor_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(100), nullable=False)
    name_key = Column(String(100), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    tutor_profile = relationship("TutorProfile", back_populates="subjects")

    __table_args__ = (
        UniqueConstraint("tutor_profile_id", "name_key", name="uq_tutor_subjects_profile_key"),
    )
