# tutorbook/core/enums.py
"""
Core enums for the TutorBook platform.

This module contains enumeration types used throughout the application
for type safety and consistency.
"""

from enum import Enum


class RoleName(str, Enum):
    """The two account roles a user can register with."""

    STUDENT = "student"
    TUTOR = "tutor"


class TutorSortKey(str, Enum):
    """Sort keys accepted by the tutor directory (always descending)."""

    RATING = "rating"
    EXPERIENCE = "experience"
    TOTAL_SESSIONS = "totalSessions"

    @classmethod
    def _missing_(cls, value: object) -> "TutorSortKey | None":
        # total_sessions, TOTAL-SESSIONS and totalsessions all mean totalSessions
        if isinstance(value, str):
            folded = value.replace("_", "").replace("-", "").lower()
            for member in cls:
                if member.value.lower() == folded:
                    return member
        return None
