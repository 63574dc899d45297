# tutorbook/services/feedback_service.py
"""
Feedback Service for the TutorBook Platform

Both sides of a completed booking may leave feedback exactly once:
- the student rates the tutor (1-5 plus an optional comment), which
  recomputes the tutor's mean rating in the same transaction
- the tutor leaves structured feedback about the student
"""

from datetime import datetime, timezone
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.constants import MAX_COMMENT_LENGTH, MAX_RATING, MIN_RATING
from ..core.exceptions import (
    AlreadyRatedException,
    ForbiddenException,
    NotCompletedException,
    NotFoundException,
    ValidationException,
)
from ..models.booking import Booking, BookingStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import Actor, StudentActor, TutorActor
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.feedback_repository import DuplicateFeedbackError, FeedbackRepository
from ..repositories.tutor_profile_repository import TutorProfileRepository
from .base import BaseService

logger = logging.getLogger(__name__)


def _validate_rating(rating: int) -> None:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationException("Rating must be an integer between 1 and 5")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise ValidationException("Rating must be an integer between 1 and 5")


def _optional_text(value: Optional[str], field: str) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    if len(text) > MAX_COMMENT_LENGTH:
        raise ValidationException(f"{field} cannot exceed {MAX_COMMENT_LENGTH} characters")
    return text or None


class FeedbackService(BaseService):
    """Student ratings and tutor feedback on completed bookings."""

    def __init__(
        self,
        db: Session,
        feedback_repository: Optional[FeedbackRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
        tutor_profile_repository: Optional[TutorProfileRepository] = None,
    ):
        super().__init__(db)
        self.feedback_repository = (
            feedback_repository or RepositoryFactory.create_feedback_repository(db)
        )
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self.tutor_profile_repository = (
            tutor_profile_repository or RepositoryFactory.create_tutor_profile_repository(db)
        )

    @BaseService.measure_operation("submit_student_rating")
    def submit_student_rating(
        self,
        actor: Actor,
        booking_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Booking:
        """
        Record the student's rating of a completed booking.

        Raises:
            ValidationException: Rating outside 1-5 or comment too long
            NotFoundException: Unknown booking
            ForbiddenException: Actor is not the booking's student
            NotCompletedException: Booking is not completed
            AlreadyRatedException: Booking was already rated
        """
        _validate_rating(rating)
        comment = _optional_text(comment, "Comment")

        booking = self._load(booking_id)
        if not isinstance(actor, StudentActor) or booking.student_id != actor.id:
            raise ForbiddenException("Only the booking's student can rate it")
        if booking.status != BookingStatus.COMPLETED.value:
            raise NotCompletedException(booking.status, "rate")

        tutor_id = booking.tutor_id
        with self.transaction():
            if self.feedback_repository.exists_for_booking(booking_id):
                raise AlreadyRatedException(booking_id)
            try:
                self.feedback_repository.create_feedback(
                    booking_id=booking_id,
                    student_id=actor.id,
                    tutor_id=tutor_id,
                    rating=rating,
                    comment=comment,
                )
            except DuplicateFeedbackError as exc:
                raise AlreadyRatedException(booking_id) from exc

            aggregate = self.feedback_repository.get_tutor_aggregate(tutor_id)
            self.tutor_profile_repository.set_rating(
                tutor_id, aggregate["mean_rating"], aggregate["rating_count"]
            )

        prometheus_metrics.inc_feedback_submitted("student")
        self.log_operation(
            "submit_student_rating",
            booking_id=booking_id,
            tutor_id=tutor_id,
            rating_count=aggregate["rating_count"],
        )
        return self._load(booking_id)

    @BaseService.measure_operation("submit_tutor_feedback")
    def submit_tutor_feedback(
        self,
        actor: Actor,
        booking_id: str,
        rating: int,
        notes: str,
        strengths: Optional[str] = None,
        improvements: Optional[str] = None,
    ) -> Booking:
        """
        Record the tutor's feedback about the student on a completed booking.

        Raises:
            ValidationException: Rating outside 1-5 or empty notes
            NotFoundException: Unknown booking
            ForbiddenException: Actor is not the booking's tutor
            NotCompletedException: Booking is not completed
            AlreadyRatedException: Feedback was already given
        """
        _validate_rating(rating)
        notes_text = _optional_text(notes, "Notes")
        if not notes_text:
            raise ValidationException("Notes are required")
        strengths = _optional_text(strengths, "Strengths")
        improvements = _optional_text(improvements, "Improvements")

        booking = self._load(booking_id)
        if not isinstance(actor, TutorActor) or booking.tutor_id != actor.id:
            raise ForbiddenException("Only the booking's tutor can give feedback on it")
        if booking.status != BookingStatus.COMPLETED.value:
            raise NotCompletedException(booking.status, "give feedback on")
        if booking.has_tutor_feedback:
            raise AlreadyRatedException(booking_id, what="tutor feedback")

        with self.transaction():
            updated = self.booking_repository.record_tutor_feedback(
                booking_id,
                {
                    "tutor_feedback_rating": rating,
                    "tutor_feedback_strengths": strengths,
                    "tutor_feedback_improvements": improvements,
                    "tutor_feedback_notes": notes_text,
                    "tutor_feedback_at": datetime.now(timezone.utc),
                },
            )
            if updated == 0:
                raise AlreadyRatedException(booking_id, what="tutor feedback")

        prometheus_metrics.inc_feedback_submitted("tutor")
        self.log_operation("submit_tutor_feedback", booking_id=booking_id)
        return self._load(booking_id)

    def _load(self, booking_id: str) -> Booking:
        booking = self.booking_repository.get_booking_with_details(booking_id)
        if not booking:
            raise NotFoundException("Booking not found")
        return booking
