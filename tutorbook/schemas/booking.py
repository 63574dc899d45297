# tutorbook/schemas/booking.py
"""
Booking schemas for the TutorBook platform.

Requests carry no actor fields that the server trusts: the actor always
comes from the bearer token, and ``studentId`` on create is only checked
against it (or, for tutors, names the student being booked).
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from ..core.constants import (
    MAX_COMMENT_LENGTH,
    MAX_PROGRESS,
    MAX_RATING,
    MAX_SESSION_DURATION,
    MIN_PROGRESS,
    MIN_RATING,
    MIN_SESSION_DURATION,
)
from ..models.booking import Booking
from ._strict_base import StrictModel, StrictRequestModel
from .common import WireDate, WireTime

BookingStatusLiteral = Literal["pending", "confirmed", "completed", "cancelled"]
BookingOriginLiteral = Literal["student_initiated", "tutor_initiated"]
ClosureKindLiteral = Literal["rejected", "cancelled"]
RoleLiteral = Literal["student", "tutor"]


def _strip_optional(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    return v.strip() or None


class BookingCreate(StrictRequestModel):
    """
    Create a booking.

    Students book a tutor (``tutorId`` required); tutors book one of their
    students (``studentId`` required, ``tutorId`` optional).
    """

    student_id: Optional[str] = Field(None, description="Student being booked")
    tutor_id: Optional[str] = Field(None, description="Tutor to book")
    subject: str = Field(..., min_length=1, max_length=100)
    topic: Optional[str] = Field(None, max_length=200)
    session_date: WireDate = Field(..., alias="date", description="YYYY-MM-DD")
    session_time: WireTime = Field(..., alias="time", description="HH:MM, 24-hour")
    duration_minutes: int = Field(
        ...,
        alias="duration",
        ge=MIN_SESSION_DURATION,
        le=MAX_SESSION_DURATION,
        description="Length in minutes",
    )
    rate: Optional[float] = Field(None, ge=0, description="Hourly rate override")
    level: Optional[str] = Field(None, max_length=50)
    message: Optional[str] = Field(None, max_length=MAX_COMMENT_LENGTH)

    @field_validator("subject")
    @classmethod
    def _subject_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("subject must not be blank")
        return v

    @field_validator("topic", "level", "message")
    @classmethod
    def _clean_optional(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class BookingReasonRequest(StrictRequestModel):
    """Optional reason for reject / cancel."""

    reason: Optional[str] = Field(None, max_length=MAX_COMMENT_LENGTH)


class BookingProgressRequest(StrictRequestModel):
    progress: int = Field(..., ge=MIN_PROGRESS, le=MAX_PROGRESS)
    notes: Optional[str] = Field(None, max_length=MAX_COMMENT_LENGTH)


class StudentRatingRequest(StrictRequestModel):
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: Optional[str] = Field(None, max_length=MAX_COMMENT_LENGTH)


class TutorFeedbackRequest(StrictRequestModel):
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    strengths: Optional[str] = Field(None, max_length=MAX_COMMENT_LENGTH)
    improvements: Optional[str] = Field(None, max_length=MAX_COMMENT_LENGTH)
    notes: str = Field(..., min_length=1, max_length=MAX_COMMENT_LENGTH)


class TutorFeedbackOut(StrictModel):
    rating: int
    strengths: Optional[str] = None
    improvements: Optional[str] = None
    notes: Optional[str] = None
    submitted_at: Optional[datetime] = None


class BookingOut(StrictModel):
    """Wire representation of a booking."""

    id: str
    student_id: str
    tutor_id: str
    student_name: Optional[str] = None
    tutor_name: Optional[str] = None
    subject: str
    topic: Optional[str] = None
    level: Optional[str] = None
    session_date: WireDate = Field(..., alias="date")
    session_time: WireTime = Field(..., alias="time")
    duration: int
    rate: float
    message: Optional[str] = None
    status: BookingStatusLiteral
    origin: BookingOriginLiteral
    progress: int = 0
    tutor_notes: Optional[str] = None
    closure_kind: Optional[ClosureKindLiteral] = None
    cancelled_by: Optional[RoleLiteral] = None
    cancellation_reason: Optional[str] = None
    student_rating: Optional[int] = None
    student_comment: Optional[str] = None
    tutor_feedback: Optional[TutorFeedbackOut] = None
    created_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, booking: Booking) -> "BookingOut":
        tutor_feedback = None
        if booking.has_tutor_feedback:
            tutor_feedback = TutorFeedbackOut(
                rating=booking.tutor_feedback_rating,
                strengths=booking.tutor_feedback_strengths,
                improvements=booking.tutor_feedback_improvements,
                notes=booking.tutor_feedback_notes,
                submitted_at=booking.tutor_feedback_at,
            )
        return cls(
            id=booking.id,
            student_id=booking.student_id,
            tutor_id=booking.tutor_id,
            student_name=booking.student.name if booking.student else None,
            tutor_name=booking.tutor.name if booking.tutor else None,
            subject=booking.subject,
            topic=booking.topic,
            level=booking.level,
            session_date=booking.session_date,
            session_time=booking.session_time,
            duration=booking.duration_minutes,
            rate=float(booking.hourly_rate or 0),
            message=booking.student_message,
            status=booking.status,
            origin=booking.origin,
            progress=booking.progress or 0,
            tutor_notes=booking.tutor_notes,
            closure_kind=booking.closure_kind,
            cancelled_by=booking.cancelled_by_role,
            cancellation_reason=booking.cancellation_reason,
            student_rating=booking.student_rating,
            student_comment=booking.student_comment,
            tutor_feedback=tutor_feedback,
            created_at=booking.created_at,
            confirmed_at=booking.confirmed_at,
            completed_at=booking.completed_at,
            cancelled_at=booking.cancelled_at,
        )


class BookingPayload(StrictModel):
    booking: BookingOut


class BookingListPayload(StrictModel):
    bookings: List[BookingOut]
    count: int
