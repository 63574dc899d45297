"""Doubt thread schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from ..core.constants import MAX_QUESTION_LENGTH
from ..models.doubt import Doubt
from ._strict_base import StrictModel, StrictRequestModel

DoubtUrgencyLiteral = Literal["normal", "high", "urgent"]
DoubtStatusLiteral = Literal["open", "answered"]


class DoubtCreate(StrictRequestModel):
    student_id: Optional[str] = None
    tutor_id: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1, max_length=100)
    question: str = Field(..., max_length=MAX_QUESTION_LENGTH)
    urgency: DoubtUrgencyLiteral = "normal"


class DoubtReplyRequest(StrictRequestModel):
    reply: str = Field(..., max_length=MAX_QUESTION_LENGTH)


class DoubtOut(StrictModel):
    id: str
    student_id: str
    tutor_id: str
    student_name: Optional[str] = None
    tutor_name: Optional[str] = None
    subject: str
    question: str
    urgency: DoubtUrgencyLiteral
    status: DoubtStatusLiteral
    reply: Optional[str] = None
    created_at: Optional[datetime] = None
    replied_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, doubt: Doubt) -> "DoubtOut":
        return cls(
            id=doubt.id,
            student_id=doubt.student_id,
            tutor_id=doubt.tutor_id,
            student_name=doubt.student.name if doubt.student else None,
            tutor_name=doubt.tutor.name if doubt.tutor else None,
            subject=doubt.subject,
            question=doubt.question,
            urgency=doubt.urgency,
            status=doubt.status,
            reply=doubt.reply,
            created_at=doubt.created_at,
            replied_at=doubt.replied_at,
        )


class DoubtPayload(StrictModel):
    doubt: DoubtOut


class DoubtListPayload(StrictModel):
    doubts: List[DoubtOut]
    count: int
