"""User and authentication schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import EmailStr, Field, field_validator

from ..models.user import User
from ._strict_base import StrictModel, StrictRequestModel


class LoginRequest(StrictRequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(StrictRequestModel):
    """
    Registration payload.

    Profile fields (subjects, bio, experience, hourlyRate) only apply to
    tutors and are ignored for students.
    """

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str
    role: str
    phone: Optional[str] = Field(None, max_length=20)
    subjects: Optional[List[str]] = None
    bio: Optional[str] = Field(None, max_length=2000)
    experience: Optional[int] = Field(None, ge=0, le=80)
    hourly_rate: Optional[float] = Field(None, ge=0)

    @field_validator("subjects", mode="before")
    @classmethod
    def _split_subjects(cls, v: object) -> object:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v


class UserOut(StrictModel):
    id: str
    name: str
    email: str
    role: Literal["student", "tutor"]
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            phone=user.phone,
            created_at=user.created_at,
        )


class UserPayload(StrictModel):
    user: UserOut


class AuthPayload(StrictModel):
    user: UserOut
    access_token: str
    token_type: str = "bearer"
