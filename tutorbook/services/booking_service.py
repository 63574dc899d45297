# tutorbook/services/booking_service.py
"""
Booking Service for the TutorBook Platform

Owns the booking lifecycle:

    create (student) ─▶ pending ─accept─▶ confirmed ─complete─▶ completed
    create (tutor)   ─────────────────▶ confirmed
    pending ─reject/cancel─▶ cancelled
    confirmed ─cancel─▶ cancelled

Each transition checks the actor against the booking first, then applies a
single conditional UPDATE keyed on the expected current status. A zero row
count means another writer moved the booking first and the call fails with
InvalidTransitionException naming the state it actually found.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import MAX_PROGRESS, MAX_SESSION_DURATION, MIN_PROGRESS, MIN_SESSION_DURATION
from ..core.enums import RoleName
from ..core.exceptions import (
    BookingConflictException,
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
    ValidationException,
)
from ..models.booking import Booking, BookingOrigin, BookingStatus, ClosureKind
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import Actor, StudentActor, TutorActor
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.tutor_profile_repository import TutorProfileRepository
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Centralizes the state machine so routes never touch booking status
    directly.
    """

    def __init__(
        self,
        db: Session,
        repository: Optional[BookingRepository] = None,
        user_repository: Optional[UserRepository] = None,
        tutor_profile_repository: Optional[TutorProfileRepository] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            repository: Optional BookingRepository instance
            user_repository: Optional UserRepository instance
            tutor_profile_repository: Optional TutorProfileRepository instance
        """
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.tutor_profile_repository = (
            tutor_profile_repository or RepositoryFactory.create_tutor_profile_repository(db)
        )

    # Creation

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self,
        actor: Actor,
        *,
        tutor_id: Optional[str],
        subject: str,
        session_date: date,
        session_time: time,
        duration_minutes: int,
        student_id: Optional[str] = None,
        topic: Optional[str] = None,
        hourly_rate: Optional[Decimal] = None,
        level: Optional[str] = None,
        message: Optional[str] = None,
    ) -> Booking:
        """
        Create a booking.

        A student creates a ``pending`` request for themselves; a tutor
        creates a ``confirmed`` session with one of their students. Both
        paths refuse a slot the tutor already holds with a pending or
        confirmed booking.

        Args:
            actor: Authenticated caller
            tutor_id: Tutor user id (defaults to the actor for tutors)
            subject: Subject of the session
            session_date: Session date
            session_time: Session start time
            duration_minutes: Session length in minutes
            student_id: Student user id (required for tutors)
            topic: Optional topic
            hourly_rate: Rate override; defaults to the tutor's current rate
            level: Optional level
            message: Optional note from the creator

        Returns:
            Created booking with both parties loaded

        Raises:
            ValidationException: Missing or malformed fields
            ForbiddenException: Actor tried to book on someone else's behalf
            NotFoundException: Student or tutor does not exist
            BookingConflictException: Tutor already holds the slot
        """
        if isinstance(actor, TutorActor):
            if tutor_id and tutor_id != actor.id:
                raise ForbiddenException("Tutors can only create sessions for themselves")
            tutor_id = actor.id
            if not student_id:
                raise ValidationException("studentId is required")
            origin = BookingOrigin.TUTOR_INITIATED
            initial_status = BookingStatus.CONFIRMED
        else:
            if student_id and student_id != actor.id:
                raise ForbiddenException("Students can only book sessions for themselves")
            student_id = actor.id
            if not tutor_id:
                raise ValidationException("tutorId is required")
            origin = BookingOrigin.STUDENT_INITIATED
            initial_status = BookingStatus.PENDING

        subject = _clean_text(subject) or ""
        if not subject:
            raise ValidationException("subject is required")
        if not MIN_SESSION_DURATION <= duration_minutes <= MAX_SESSION_DURATION:
            raise ValidationException(
                f"duration must be between {MIN_SESSION_DURATION} and "
                f"{MAX_SESSION_DURATION} minutes"
            )
        if hourly_rate is not None and hourly_rate < 0:
            raise ValidationException("rate must not be negative")

        with self.transaction():
            student = self.user_repository.get_with_role(student_id, RoleName.STUDENT.value)
            if not student:
                raise NotFoundException("Student not found")
            tutor = self.user_repository.get_with_role(tutor_id, RoleName.TUTOR.value)
            if not tutor:
                raise NotFoundException("Tutor not found")

            if self.repository.has_open_booking_at(tutor_id, session_date, session_time):
                raise BookingConflictException(
                    details={
                        "tutor_id": tutor_id,
                        "date": session_date.isoformat(),
                        "time": session_time.strftime("%H:%M"),
                    }
                )

            if hourly_rate is None:
                profile = self.tutor_profile_repository.get_by_user_id(tutor_id)
                hourly_rate = profile.hourly_rate if profile else Decimal("0")

            values: Dict[str, Any] = {
                "student_id": student_id,
                "tutor_id": tutor_id,
                "subject": subject,
                "topic": _clean_text(topic),
                "level": _clean_text(level),
                "session_date": session_date,
                "session_time": session_time,
                "duration_minutes": duration_minutes,
                "hourly_rate": hourly_rate,
                "student_message": _clean_text(message),
                "status": initial_status.value,
                "origin": origin.value,
            }
            if initial_status == BookingStatus.CONFIRMED:
                values["confirmed_at"] = _utcnow()

            booking = self.repository.create(**values)
            booking_id = booking.id

        prometheus_metrics.record_booking_transition("create", initial_status.value)
        self.log_operation(
            "create_booking",
            booking_id=booking_id,
            origin=origin.value,
            status=initial_status.value,
        )
        return self._reload(booking_id)

    # Transitions

    @BaseService.measure_operation("accept_booking")
    def accept_booking(self, actor: Actor, booking_id: str) -> Booking:
        """Tutor confirms a pending request."""
        booking = self._get_for_tutor(actor, booking_id, "accept")
        return self._transition(
            booking,
            "accept",
            [BookingStatus.PENDING],
            {"status": BookingStatus.CONFIRMED.value, "confirmed_at": _utcnow()},
        )

    @BaseService.measure_operation("reject_booking")
    def reject_booking(
        self, actor: Actor, booking_id: str, reason: Optional[str] = None
    ) -> Booking:
        """Tutor declines a pending request; the booking closes as rejected."""
        booking = self._get_for_tutor(actor, booking_id, "reject")
        return self._transition(
            booking,
            "reject",
            [BookingStatus.PENDING],
            self._closure_values(actor, ClosureKind.REJECTED, reason),
        )

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(
        self, actor: Actor, booking_id: str, reason: Optional[str] = None
    ) -> Booking:
        """
        Cancel a booking.

        Students may withdraw a pending request or cancel a confirmed
        session; tutors may only cancel confirmed sessions (pending requests
        are declined with reject).
        """
        booking = self._get_for_party(actor, booking_id)
        if isinstance(actor, TutorActor):
            allowed = [BookingStatus.CONFIRMED]
        else:
            allowed = [BookingStatus.PENDING, BookingStatus.CONFIRMED]
        return self._transition(
            booking,
            "cancel",
            allowed,
            self._closure_values(actor, ClosureKind.CANCELLED, reason),
        )

    @BaseService.measure_operation("complete_booking")
    def complete_booking(self, actor: Actor, booking_id: str) -> Booking:
        """
        Mark a confirmed session as held.

        The tutor's completed-session counter is incremented in the same
        transaction, exactly once per booking.
        """
        booking = self._get_for_tutor(actor, booking_id, "complete")
        return self._transition(
            booking,
            "complete",
            [BookingStatus.CONFIRMED],
            {"status": BookingStatus.COMPLETED.value, "completed_at": _utcnow()},
        )

    @BaseService.measure_operation("update_progress")
    def update_progress(
        self,
        actor: Actor,
        booking_id: str,
        progress: int,
        notes: Optional[str] = None,
    ) -> Booking:
        """
        Record the student's progress on a confirmed or completed booking.

        Reaching 100 on a confirmed booking completes it.
        """
        if not MIN_PROGRESS <= progress <= MAX_PROGRESS:
            raise ValidationException(
                f"Progress must be between {MIN_PROGRESS} and {MAX_PROGRESS}"
            )
        booking = self._get_for_tutor(actor, booking_id, "update progress on")

        values: Dict[str, Any] = {"progress": progress}
        cleaned_notes = _clean_text(notes)
        if cleaned_notes is not None:
            values["tutor_notes"] = cleaned_notes

        if progress == MAX_PROGRESS and booking.status == BookingStatus.CONFIRMED.value:
            values.update(status=BookingStatus.COMPLETED.value, completed_at=_utcnow())
            return self._transition(booking, "complete", [BookingStatus.CONFIRMED], values)

        return self._transition(
            booking,
            "update progress on",
            [BookingStatus.CONFIRMED, BookingStatus.COMPLETED],
            values,
        )

    # Reads

    @BaseService.measure_operation("get_booking")
    def get_booking(self, actor: Actor, booking_id: str) -> Booking:
        """Return a booking the actor takes part in."""
        return self._get_for_party(actor, booking_id)

    @BaseService.measure_operation("list_bookings")
    def list_bookings(self, actor: Actor, status: Optional[str] = None) -> List[Booking]:
        """Return the actor's bookings, most recent session first."""
        if status is not None:
            valid = {s.value for s in BookingStatus}
            if status not in valid:
                raise ValidationException(
                    f"status must be one of: {', '.join(sorted(valid))}",
                    details={"status": status},
                )
        return self.repository.list_for_user(actor.id, actor.role, status)

    # Helpers

    def _reload(self, booking_id: str) -> Booking:
        booking = self.repository.get_booking_with_details(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found")
        return booking

    def _get_for_party(self, actor: Actor, booking_id: str) -> Booking:
        booking = self._reload(booking_id)
        own_id = booking.tutor_id if isinstance(actor, TutorActor) else booking.student_id
        if own_id != actor.id:
            raise ForbiddenException("You do not have access to this booking")
        return booking

    def _get_for_tutor(self, actor: Actor, booking_id: str, event: str) -> Booking:
        if isinstance(actor, StudentActor):
            raise ForbiddenException(f"Only the tutor can {event} a booking")
        return self._get_for_party(actor, booking_id)

    @staticmethod
    def _closure_values(
        actor: Actor, kind: ClosureKind, reason: Optional[str]
    ) -> Dict[str, Any]:
        return {
            "status": BookingStatus.CANCELLED.value,
            "closure_kind": kind.value,
            "cancelled_by_id": actor.id,
            "cancelled_by_role": actor.role,
            "cancellation_reason": _clean_text(reason),
            "cancelled_at": _utcnow(),
        }

    def _transition(
        self,
        booking: Booking,
        event: str,
        from_statuses: Iterable[BookingStatus],
        values: Dict[str, Any],
    ) -> Booking:
        allowed = list(from_statuses)
        if booking.status not in {s.value for s in allowed}:
            raise InvalidTransitionException(booking.status, event)

        booking_id = booking.id
        to_status = values.get("status", booking.status)
        completing = (
            to_status == BookingStatus.COMPLETED.value
            and booking.status != BookingStatus.COMPLETED.value
        )

        with self.transaction():
            updated = self.repository.transition(booking_id, allowed, values)
            if updated == 0:
                current = self.repository.get_by_id(booking_id, load_relationships=False)
                raise InvalidTransitionException(
                    current.status if current else booking.status, event
                )
            if completing:
                self.tutor_profile_repository.increment_total_sessions(booking.tutor_id)

        prometheus_metrics.record_booking_transition(event, to_status)
        self.log_operation(event, booking_id=booking_id, to_status=to_status)
        return self._reload(booking_id)
