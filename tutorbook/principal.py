"""Actor abstractions for authenticated callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

from .core.enums import RoleName


@dataclass(frozen=True)
class StudentActor:
    """A signed-in student. May request, cancel and rate bookings and ask doubts."""

    user_id: str
    email: str

    @property
    def id(self) -> str:
        return self.user_id

    @property
    def role(self) -> Literal["student", "tutor"]:
        return "student"


@dataclass(frozen=True)
class TutorActor:
    """A signed-in tutor. May accept, reject, complete and review bookings and answer doubts."""

    user_id: str
    email: str

    @property
    def id(self) -> str:
        return self.user_id

    @property
    def role(self) -> Literal["student", "tutor"]:
        return "tutor"


Actor = Union[StudentActor, TutorActor]


def actor_for(user_id: str, email: str, role: str) -> Actor:
    """Build the actor matching a stored role."""
    if role == RoleName.TUTOR.value:
        return TutorActor(user_id=user_id, email=email)
    return StudentActor(user_id=user_id, email=email)
