# tutorbook/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_actor, get_current_user
from .database import get_db
from .services import (
    get_auth_service,
    get_booking_service,
    get_doubt_service,
    get_feedback_service,
    get_tutor_directory_service,
)

__all__ = [
    # Auth
    "get_current_actor",
    "get_current_user",
    # Database
    "get_db",
    # Services
    "get_auth_service",
    "get_booking_service",
    "get_doubt_service",
    "get_feedback_service",
    "get_tutor_directory_service",
]
