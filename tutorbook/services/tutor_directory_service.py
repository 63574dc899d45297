# tutorbook/services/tutor_directory_service.py
"""
Tutor Directory Service for the TutorBook Platform

Read-only catalog of tutors: filtered, sorted listings and single
profile lookups.
"""

from decimal import Decimal
import logging
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import MAX_RATING
from ..core.enums import TutorSortKey
from ..core.exceptions import NotFoundException, ValidationException
from ..models.tutor import TutorProfile
from ..repositories.factory import RepositoryFactory
from ..repositories.tutor_profile_repository import TutorProfileRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class TutorDirectoryService(BaseService):
    """Service layer for browsing tutors."""

    def __init__(self, db: Session, repository: Optional[TutorProfileRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_tutor_profile_repository(db)

    @BaseService.measure_operation("list_tutors")
    def list_tutors(
        self,
        subject: Optional[str] = None,
        min_rating: Optional[float] = None,
        min_experience: Optional[int] = None,
        max_rate: Optional[Union[Decimal, float]] = None,
        available: Optional[bool] = None,
        sort: Union[TutorSortKey, str] = TutorSortKey.RATING,
        limit: Optional[int] = None,
    ) -> List[TutorProfile]:
        """
        List tutors matching all supplied filters.

        Args:
            subject: Exact subject, case-insensitive
            min_rating: Minimum mean rating (0-5)
            min_experience: Minimum years of experience
            max_rate: Maximum hourly rate
            available: Only tutors with this availability flag
            sort: rating, experience or totalSessions (descending)
            limit: Result cap, 1 to the configured maximum

        Raises:
            ValidationException: A filter is out of range or the sort key is unknown
        """
        try:
            sort_key = TutorSortKey(sort)
        except ValueError:
            raise ValidationException(
                "sort must be one of: rating, experience, totalSessions",
                details={"sort": str(sort)},
            )

        if min_rating is not None and not 0 <= min_rating <= MAX_RATING:
            raise ValidationException(f"min_rating must be between 0 and {MAX_RATING}")
        if min_experience is not None and min_experience < 0:
            raise ValidationException("min_experience must not be negative")
        if max_rate is not None and max_rate < 0:
            raise ValidationException("max_rate must not be negative")

        if limit is None:
            limit = settings.tutor_directory_default_limit
        if not 1 <= limit <= settings.tutor_directory_max_limit:
            raise ValidationException(
                f"limit must be between 1 and {settings.tutor_directory_max_limit}"
            )

        subject = subject.strip() if subject else None

        return self.repository.find_by_filters(
            subject=subject or None,
            min_rating=min_rating,
            min_experience=min_experience,
            max_rate=Decimal(str(max_rate)) if max_rate is not None else None,
            available=available,
            sort=sort_key,
            limit=limit,
        )

    @BaseService.measure_operation("get_tutor")
    def get_tutor(self, tutor_id: str) -> TutorProfile:
        """Return one tutor's public profile by user id."""
        profile = self.repository.get_by_user_id(tutor_id)
        if not profile:
            raise NotFoundException("Tutor not found")
        return profile
