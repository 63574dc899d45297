# tutorbook/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
bound to the request's database session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.auth_service import AuthService
from ...services.booking_service import BookingService
from ...services.doubt_service import DoubtService
from ...services.feedback_service import FeedbackService
from ...services.tutor_directory_service import TutorDirectoryService
from .database import get_db


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Get AuthService instance."""
    return AuthService(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """
    Get booking service instance.

    Args:
        db: Database session

    Returns:
        BookingService instance
    """
    return BookingService(db)


def get_feedback_service(db: Session = Depends(get_db)) -> FeedbackService:
    """Get FeedbackService instance."""
    return FeedbackService(db)


def get_doubt_service(db: Session = Depends(get_db)) -> DoubtService:
    """Get DoubtService instance."""
    return DoubtService(db)


def get_tutor_directory_service(db: Session = Depends(get_db)) -> TutorDirectoryService:
    """Get TutorDirectoryService instance."""
    return TutorDirectoryService(db)
