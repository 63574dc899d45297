# tutorbook/repositories/feedback_repository.py
"""
Repository for student feedback.

Follows repository pattern: no business logic, DB-only operations.
"""

import logging
from typing import Any, Mapping, Optional, TypedDict, cast

from sqlalchemy import func
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.feedback import Feedback
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TutorRatingAggregate(TypedDict):
    rating_count: int
    mean_rating: Optional[float]


class DuplicateFeedbackError(RepositoryException):
    """The (booking, student) pair already has a feedback row."""


class FeedbackRepository(BaseRepository[Feedback]):
    """Data access for `Feedback`."""

    def __init__(self, db: Session):
        super().__init__(db, Feedback)
        self.logger = logging.getLogger(__name__)

    def create_feedback(self, **kwargs: Any) -> Feedback:
        """
        Insert a feedback row.

        A unique-constraint violation on (booking, student) rolls back the
        session and is reported as DuplicateFeedbackError.
        """
        try:
            feedback = Feedback(**kwargs)
            self.db.add(feedback)
            self.db.flush()
            return feedback
        except IntegrityError as e:
            self.db.rollback()
            self.logger.info(f"Duplicate feedback for booking {kwargs.get('booking_id')}: {e}")
            raise DuplicateFeedbackError(f"Feedback already exists: {e}") from e
        except Exception as e:
            self.logger.error(f"Error creating feedback: {e}")
            raise RepositoryException(f"Failed to create feedback: {e}")

    def exists_for_booking(self, booking_id: str) -> bool:
        try:
            return (
                self.db.query(self.model.id).filter(self.model.booking_id == booking_id).first()
                is not None
            )
        except Exception as e:
            self.logger.error(f"Error checking feedback existence: {e}")
            raise RepositoryException(f"Failed to check feedback existence: {e}")

    def get_tutor_aggregate(self, tutor_id: str) -> TutorRatingAggregate:
        """Return the count and arithmetic mean of every rating the tutor has received."""
        try:
            row = (
                self.db.query(
                    func.count(Feedback.id).label("rating_count"),
                    func.avg(Feedback.rating * 1.0).label("mean_rating"),
                )
                .filter(Feedback.tutor_id == tutor_id, Feedback.rating.isnot(None))
                .first()
            )
            if not row:
                return {"rating_count": 0, "mean_rating": None}
            mapping: Mapping[str, Any] = cast(Row[Any], row)._mapping
            count = int(mapping.get("rating_count", 0) or 0)
            mean = mapping.get("mean_rating")
            return {
                "rating_count": count,
                "mean_rating": float(mean) if count and mean is not None else None,
            }
        except Exception as e:
            self.logger.error(f"Error aggregating tutor ratings: {e}")
            raise RepositoryException(f"Failed to aggregate ratings: {e}")
