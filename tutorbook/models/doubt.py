# tutorbook/models/doubt.py
"""
Doubt model: a stand-alone question a student asks a specific tutor.

Doubts are independent of bookings. They start ``open`` and move to
``answered`` exactly once, when the addressed tutor replies. They are never
reopened or deleted.
"""

from datetime import datetime, timezone
from enum import Enum
import logging

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class DoubtStatus(str, Enum):
    OPEN = "open"
    ANSWERED = "answered"


class DoubtUrgency(str, Enum):
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class Doubt(Base):
    """A student's question and, once given, the tutor's reply."""

    __tablename__ = "doubts"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    student_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    tutor_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)

    subject = Column(String(100), nullable=False)
    question = Column(Text, nullable=False)
    urgency = Column(String(10), nullable=False, default=DoubtUrgency.NORMAL.value)
    status = Column(String(10), nullable=False, default=DoubtStatus.OPEN.value, index=True)

    reply = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    replied_at = Column(DateTime(timezone=True), nullable=True)

    student = relationship("User", foreign_keys=[student_id], lazy="joined")
    tutor = relationship("User", foreign_keys=[tutor_id], lazy="joined")

    __table_args__ = (
        CheckConstraint("status IN ('open', 'answered')", name="ck_doubts_status"),
        CheckConstraint("urgency IN ('normal', 'high', 'urgent')", name="ck_doubts_urgency"),
        CheckConstraint(
            "(status = 'open' AND reply IS NULL AND replied_at IS NULL) OR "
            "(status = 'answered' AND reply IS NOT NULL AND replied_at IS NOT NULL)",
            name="ck_doubts_reply_consistency",
        ),
        Index("ix_doubts_tutor_status", "tutor_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Doubt {self.id}: student={self.student_id}, tutor={self.tutor_id}, status={self.status}>"

    @property
    def is_answered(self) -> bool:
        return self.status == DoubtStatus.ANSWERED.value
