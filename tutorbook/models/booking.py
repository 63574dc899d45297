# tutorbook/models/booking.py
"""
Booking model for the TutorBook platform.

Represents a tutoring session between one student and one tutor, stored in
the ``sessions`` table. Bookings are never deleted: rejection and
cancellation are terminal states, recorded together with who closed the
booking and why.

State machine (forward only):

    pending ──accept──▶ confirmed ──complete──▶ completed
       │                    │
       ├──reject/cancel──▶ cancelled ◀──cancel──┘

Student ratings live in the ``feedback`` table (one row per booking and
student); the tutor's feedback about the student is embedded here.
"""

from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Any, Dict, FrozenSet, Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Requested by a student, awaiting the tutor
    CONFIRMED = "confirmed"  # Accepted, or created by the tutor
    COMPLETED = "completed"  # Session held; feedback unlocked
    CANCELLED = "cancelled"  # Rejected by the tutor or cancelled by either side


class BookingOrigin(str, Enum):
    """Who created the booking."""

    STUDENT_INITIATED = "student_initiated"
    TUTOR_INITIATED = "tutor_initiated"


class ClosureKind(str, Enum):
    """Why a booking reached the cancelled state."""

    REJECTED = "rejected"
    CANCELLED = "cancelled"


OPEN_STATUSES: FrozenSet[str] = frozenset(
    {BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value}
)


class Booking(Base):
    """
    Self-contained tutoring session record.

    Design: the tutor's rate is snapshotted at booking time so later profile
    changes do not rewrite history.
    """

    __tablename__ = "sessions"

    # Primary key
    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    # Core relationships
    student_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    tutor_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)

    # What and when
    subject = Column(String(100), nullable=False)
    topic = Column(String(200), nullable=True)
    level = Column(String(50), nullable=True)
    session_date = Column(Date, nullable=False)
    session_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)
    student_message = Column(Text, nullable=True)

    # Lifecycle
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    origin = Column(
        String(20), nullable=False, default=BookingOrigin.STUDENT_INITIATED.value
    )

    # Progress reported by the tutor
    progress = Column(Integer, nullable=False, default=0)
    tutor_notes = Column(Text, nullable=True)

    # Closure tracking (cancelled bookings only)
    closure_kind = Column(String(20), nullable=True)
    cancelled_by_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    cancelled_by_role = Column(String(20), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    # Tutor feedback about the student (completed bookings only, set once)
    tutor_feedback_rating = Column(Integer, nullable=True)
    tutor_feedback_strengths = Column(Text, nullable=True)
    tutor_feedback_improvements = Column(Text, nullable=True)
    tutor_feedback_notes = Column(Text, nullable=True)
    tutor_feedback_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(DateTime(timezone=True), onupdate=lambda: datetime.now(timezone.utc))
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    student = relationship("User", foreign_keys=[student_id], lazy="joined")
    tutor = relationship("User", foreign_keys=[tutor_id], lazy="joined")
    cancelled_by = relationship("User", foreign_keys=[cancelled_by_id])
    student_feedback = relationship(
        "Feedback", back_populates="booking", uselist=False, lazy="selectin"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="ck_sessions_status",
        ),
        CheckConstraint(
            "origin IN ('student_initiated', 'tutor_initiated')",
            name="ck_sessions_origin",
        ),
        CheckConstraint(
            "closure_kind IS NULL OR closure_kind IN ('rejected', 'cancelled')",
            name="ck_sessions_closure_kind",
        ),
        CheckConstraint("duration_minutes > 0", name="ck_sessions_duration_positive"),
        CheckConstraint("hourly_rate >= 0", name="ck_sessions_rate_non_negative"),
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_sessions_progress_range"),
        CheckConstraint(
            "tutor_feedback_rating IS NULL OR "
            "(tutor_feedback_rating >= 1 AND tutor_feedback_rating <= 5)",
            name="ck_sessions_tutor_feedback_rating",
        ),
        Index("ix_sessions_tutor_slot", "tutor_id", "session_date", "session_time", "status"),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Booking {self.id}: student={self.student_id}, "
            f"tutor={self.tutor_id}, date={self.session_date}, "
            f"time={self.session_time}, status={self.status}>"
        )

    @property
    def student_rating(self) -> Optional[int]:
        return self.student_feedback.rating if self.student_feedback else None

    @property
    def student_comment(self) -> Optional[str]:
        return self.student_feedback.comment if self.student_feedback else None

    @property
    def has_tutor_feedback(self) -> bool:
        return self.tutor_feedback_at is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging and debugging."""
        return {
            "id": self.id,
            "student_id": self.student_id,
            "tutor_id": self.tutor_id,
            "subject": self.subject,
            "session_date": self.session_date.isoformat() if self.session_date else None,
            "session_time": self.session_time.strftime("%H:%M") if self.session_time else None,
            "duration_minutes": self.duration_minutes,
            "status": self.status,
            "origin": self.origin,
            "closure_kind": self.closure_kind,
            "progress": self.progress,
        }
