"""
Database models for the TutorBook platform.

This module exports all SQLAlchemy models used in the application:
- Users and tutor profiles (with the subjects they teach)
- Bookings (the ``sessions`` table) and student feedback
- Doubts (stand-alone student questions)
"""

from .booking import Booking, BookingOrigin, BookingStatus, ClosureKind
from .doubt import Doubt, DoubtStatus, DoubtUrgency
from .feedback import Feedback
from .tutor import TutorProfile, TutorSubject
from .user import User

__all__ = [
    "Booking",
    "BookingOrigin",
    "BookingStatus",
    "ClosureKind",
    "Doubt",
    "DoubtStatus",
    "DoubtUrgency",
    "Feedback",
    "TutorProfile",
    "TutorSubject",
    "User",
]
