# tutorbook/repositories/factory.py
"""
Repository Factory for the TutorBook Platform

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from .base_repository import BaseRepository

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .doubt_repository import DoubtRepository
    from .feedback_repository import FeedbackRepository
    from .tutor_profile_repository import TutorProfileRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_base_repository(db: Session, model) -> BaseRepository:
        """
        Create a generic base repository for any model.

        Args:
            db: Database session
            model: SQLAlchemy model class

        Returns:
            BaseRepository instance
        """
        return BaseRepository(db, model)

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        """Create repository for user lookups."""
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_tutor_profile_repository(db: Session) -> "TutorProfileRepository":
        """Create repository for tutor profiles and directory queries."""
        from .tutor_profile_repository import TutorProfileRepository

        return TutorProfileRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking operations."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_feedback_repository(db: Session) -> "FeedbackRepository":
        """Create repository for student feedback."""
        from .feedback_repository import FeedbackRepository

        return FeedbackRepository(db)

    @staticmethod
    def create_doubt_repository(db: Session) -> "DoubtRepository":
        """Create repository for doubts."""
        from .doubt_repository import DoubtRepository

        return DoubtRepository(db)
