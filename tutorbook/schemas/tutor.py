"""Tutor directory schemas."""

from typing import List, Optional

from ..models.tutor import TutorProfile
from ._strict_base import StrictModel


class TutorOut(StrictModel):
    """Public tutor card; ``id`` is the tutor's user id."""

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    subjects: List[str]
    bio: Optional[str] = None
    experience: int
    hourly_rate: float
    available: bool
    rating: Optional[float] = None
    rating_count: int = 0
    total_sessions: int = 0

    @classmethod
    def from_model(cls, profile: TutorProfile) -> "TutorOut":
        user = profile.user
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            subjects=profile.subject_names,
            bio=profile.bio,
            experience=profile.years_experience or 0,
            hourly_rate=float(profile.hourly_rate or 0),
            available=bool(profile.is_available),
            rating=round(profile.rating, 2) if profile.rating is not None else None,
            rating_count=profile.rating_count or 0,
            total_sessions=profile.total_sessions or 0,
        )


class TutorPayload(StrictModel):
    tutor: TutorOut


class TutorListPayload(StrictModel):
    tutors: List[TutorOut]
    count: int
