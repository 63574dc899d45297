# tutorbook/repositories/__init__.py
"""
Repository Pattern Implementation for the TutorBook Platform

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: Load by id, insert, and conditional update
- RepositoryFactory: Factory for creating repository instances
- BookingRepository: Conflict checks and conditional state transitions
- TutorProfileRepository: Directory queries and derived aggregates

Usage:
    from tutorbook.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_booking_repository(db)
    taken = repository.has_open_booking_at(tutor_id, session_date, session_time)
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .doubt_repository import DoubtRepository
from .factory import RepositoryFactory
from .feedback_repository import DuplicateFeedbackError, FeedbackRepository
from .tutor_profile_repository import TutorProfileRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "RepositoryFactory",
    "BookingRepository",
    "DoubtRepository",
    "DuplicateFeedbackError",
    "FeedbackRepository",
    "TutorProfileRepository",
    "UserRepository",
]
