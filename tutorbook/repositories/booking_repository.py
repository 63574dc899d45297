# tutorbook/repositories/booking_repository.py
"""
Booking Repository for the TutorBook Platform

Implements all data access operations for booking management: the
same-slot conflict check, per-user listings, and the conditional updates
that move a booking through its lifecycle.

Every state change is a single ``UPDATE ... WHERE id = ? AND status IN (...)``
so two concurrent writers cannot both apply a transition; callers inspect
the returned row count.
"""

from datetime import date, time
import logging
from typing import Any, Dict, Iterable, List, Optional, cast

from sqlalchemy import desc
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ..core.enums import RoleName
from ..core.exceptions import RepositoryException
from ..models.booking import OPEN_STATUSES, Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """
    Repository for booking data access.

    Manages bookings as self-contained records; bookings are never deleted.
    """

    def __init__(self, db: Session):
        """Initialize with Booking model."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(Booking.student),
            joinedload(Booking.tutor),
            selectinload(Booking.student_feedback),
        )

    # Conflict checking

    def has_open_booking_at(
        self,
        tutor_id: str,
        session_date: date,
        session_time: time,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """
        Check whether the tutor already holds a pending or confirmed booking
        at exactly this date and start time.

        Args:
            tutor_id: The tutor's user ID
            session_date: Requested date
            session_time: Requested start time
            exclude_booking_id: Optional booking to exclude

        Returns:
            True if the slot is taken, False otherwise
        """
        try:
            query = self.db.query(Booking.id).filter(
                Booking.tutor_id == tutor_id,
                Booking.session_date == session_date,
                Booking.session_time == session_time,
                Booking.status.in_(sorted(OPEN_STATUSES)),
            )

            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)

            return query.first() is not None

        except Exception as e:
            self.logger.error(f"Error checking slot conflict: {str(e)}")
            raise RepositoryException(f"Failed to check conflict: {str(e)}")

    # Listings

    def get_booking_with_details(self, booking_id: str) -> Optional[Booking]:
        """Get a booking with both parties and the student feedback loaded."""
        return self.get_by_id(booking_id, load_relationships=True)

    def list_for_user(
        self,
        user_id: str,
        role: str,
        status: Optional[str] = None,
        limit: int = 100,
    ) -> List[Booking]:
        """
        Get the bookings a user takes part in, newest session first.

        Args:
            user_id: The caller's user ID
            role: The caller's role; selects the student or tutor column
            status: Optional status filter
            limit: Maximum number of bookings to return

        Returns:
            List of bookings ordered by date and time descending
        """
        try:
            column = Booking.tutor_id if role == RoleName.TUTOR.value else Booking.student_id
            query = self._apply_eager_loading(self.db.query(Booking).filter(column == user_id))

            if status:
                query = query.filter(Booking.status == status)

            query = query.order_by(
                desc(Booking.session_date), desc(Booking.session_time), desc(Booking.created_at)
            )
            return cast(List[Booking], query.limit(limit).all())

        except Exception as e:
            self.logger.error(f"Error listing bookings for {role} {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    # Conditional state changes

    def transition(
        self,
        booking_id: str,
        from_statuses: Iterable[BookingStatus],
        values: Dict[str, Any],
    ) -> int:
        """
        Apply ``values`` only if the booking is still in one of ``from_statuses``.

        Returns:
            Number of rows updated (0 or 1)
        """
        allowed = [s.value for s in from_statuses]
        return self.update_where(booking_id, [Booking.status.in_(allowed)], values)

    def record_tutor_feedback(self, booking_id: str, values: Dict[str, Any]) -> int:
        """Store tutor feedback once, on a completed booking without feedback yet."""
        return self.update_where(
            booking_id,
            [
                Booking.status == BookingStatus.COMPLETED.value,
                Booking.tutor_feedback_at.is_(None),
            ],
            values,
        )
