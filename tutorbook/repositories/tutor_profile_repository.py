# tutorbook/repositories/tutor_profile_repository.py
"""
Tutor Profile Repository for the TutorBook Platform

Handles data access for tutor profiles: the filtered, sorted directory
listing and the two derived aggregates (mean rating and completed
session count).
"""

from decimal import Decimal
import logging
from typing import List, Optional, cast

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ..core.enums import TutorSortKey
from ..core.exceptions import RepositoryException
from ..models.tutor import TutorProfile, TutorSubject, normalize_subject
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TutorProfileRepository(BaseRepository[TutorProfile]):
    """
    Repository for tutor profile data access.

    Eager loads the owning user and the subject rows so directory
    listings do not issue one query per tutor.
    """

    def __init__(self, db: Session):
        """Initialize with TutorProfile model."""
        super().__init__(db, TutorProfile)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(TutorProfile.user),
            selectinload(TutorProfile.subjects),
        )

    def get_by_user_id(self, user_id: str) -> Optional[TutorProfile]:
        """
        Get tutor profile by user ID.

        Args:
            user_id: The tutor's user ID

        Returns:
            TutorProfile if found, None otherwise
        """
        try:
            query = self._apply_eager_loading(
                self.db.query(TutorProfile)
                .join(TutorProfile.user)
                .filter(TutorProfile.user_id == user_id, User.is_active.is_(True))
            )
            return cast(Optional[TutorProfile], query.populate_existing().first())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting tutor profile for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve tutor profile: {str(e)}")

    def find_by_filters(
        self,
        subject: Optional[str] = None,
        min_rating: Optional[float] = None,
        min_experience: Optional[int] = None,
        max_rate: Optional[Decimal] = None,
        available: Optional[bool] = None,
        sort: TutorSortKey = TutorSortKey.RATING,
        limit: int = 50,
    ) -> List[TutorProfile]:
        """
        List tutors matching every supplied filter.

        Absent filters are ignored. Results are ordered descending by the
        sort key; unrated tutors always come after rated ones, and ties fall
        back to the profile id so the order is stable.

        Args:
            subject: Exact subject name, matched case-insensitively
            min_rating: Minimum mean rating; excludes unrated tutors
            min_experience: Minimum years of experience
            max_rate: Maximum hourly rate
            available: Availability flag to match
            sort: Sort key
            limit: Maximum number of profiles to return

        Returns:
            List of TutorProfile with user and subjects loaded
        """
        try:
            query = self.db.query(TutorProfile).join(TutorProfile.user)
            query = query.filter(User.is_active.is_(True))

            if subject:
                key = normalize_subject(subject)
                query = query.filter(
                    TutorProfile.subjects.any(TutorSubject.name_key == key)
                )
            if min_rating is not None:
                query = query.filter(TutorProfile.rating >= min_rating)
            if min_experience is not None:
                query = query.filter(TutorProfile.years_experience >= min_experience)
            if max_rate is not None:
                query = query.filter(TutorProfile.hourly_rate <= max_rate)
            if available is not None:
                query = query.filter(TutorProfile.is_available.is_(available))

            if sort == TutorSortKey.EXPERIENCE:
                ordering = [desc(TutorProfile.years_experience)]
            elif sort == TutorSortKey.TOTAL_SESSIONS:
                ordering = [desc(TutorProfile.total_sessions)]
            else:
                # NULL ratings last on every dialect
                ordering = [TutorProfile.rating.is_(None), desc(TutorProfile.rating)]

            query = self._apply_eager_loading(query)
            query = query.order_by(*ordering, TutorProfile.id).limit(limit)
            return cast(List[TutorProfile], query.all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing tutors: {str(e)}")
            raise RepositoryException(f"Failed to list tutors: {str(e)}")

    def increment_total_sessions(self, user_id: str) -> int:
        """Add one completed session to the tutor's counter in a single UPDATE."""
        try:
            rowcount = (
                self.db.query(TutorProfile)
                .filter(TutorProfile.user_id == user_id)
                .update(
                    {TutorProfile.total_sessions: TutorProfile.total_sessions + 1},
                    synchronize_session=False,
                )
            )
            self.db.flush()
            return int(rowcount or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error incrementing sessions for tutor {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to update tutor sessions: {str(e)}")

    def set_rating(self, user_id: str, rating: Optional[float], rating_count: int) -> None:
        """Store a freshly recomputed mean rating."""
        try:
            self.db.query(TutorProfile).filter(TutorProfile.user_id == user_id).update(
                {TutorProfile.rating: rating, TutorProfile.rating_count: rating_count},
                synchronize_session=False,
            )
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating rating for tutor {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to update tutor rating: {str(e)}")
