# tutorbook/models/feedback.py
"""
Student feedback model.

Design notes:
- One feedback row per (booking, student), enforced by a unique constraint
- Rating 1-5 enforced in the database as well as the service layer
- tutor_id is denormalised from the booking so the tutor's mean rating is a
  single aggregate query
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class Feedback(Base):
    """Rating and optional comment a student leaves on a completed booking."""

    __tablename__ = "feedback"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))

    booking_id = Column(String(26), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    tutor_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    booking = relationship("Booking", back_populates="student_feedback")

    __table_args__ = (
        UniqueConstraint("booking_id", "student_id", name="uq_feedback_booking_student"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_rating_range"),
        Index("idx_feedback_booking", "booking_id"),
    )

    def __repr__(self) -> str:
        return f"<Feedback {self.id}: booking={self.booking_id}, rating={self.rating}>"
