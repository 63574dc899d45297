# tutorbook/services/doubt_service.py
"""
Doubt Service for the TutorBook Platform

Students ask a specific tutor a question outside of any booking; the
addressed tutor answers it exactly once.
"""

from datetime import datetime, timezone
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.constants import MAX_QUESTION_LENGTH
from ..core.enums import RoleName
from ..core.exceptions import (
    AlreadyAnsweredException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..models.doubt import Doubt, DoubtStatus, DoubtUrgency
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import Actor, StudentActor, TutorActor
from ..repositories.doubt_repository import DoubtRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class DoubtService(BaseService):
    """Service layer for the doubt thread."""

    def __init__(
        self,
        db: Session,
        repository: Optional[DoubtRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_doubt_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("submit_doubt")
    def submit_doubt(
        self,
        actor: Actor,
        *,
        tutor_id: str,
        subject: str,
        question: str,
        urgency: str = DoubtUrgency.NORMAL.value,
        student_id: Optional[str] = None,
    ) -> Doubt:
        """
        Open a new doubt addressed to a tutor.

        Raises:
            ForbiddenException: Actor is not a student, or asks on someone else's behalf
            ValidationException: Empty question or subject, unknown urgency
            NotFoundException: Tutor does not exist
        """
        if not isinstance(actor, StudentActor):
            raise ForbiddenException("Only students can submit doubts")
        if student_id and student_id != actor.id:
            raise ForbiddenException("Students can only submit doubts for themselves")

        question_text = (question or "").strip()
        if not question_text:
            raise ValidationException("Question must not be empty")
        if len(question_text) > MAX_QUESTION_LENGTH:
            raise ValidationException(
                f"Question cannot exceed {MAX_QUESTION_LENGTH} characters"
            )
        subject_text = (subject or "").strip()
        if not subject_text:
            raise ValidationException("subject is required")
        valid_urgencies = {u.value for u in DoubtUrgency}
        if urgency not in valid_urgencies:
            raise ValidationException(
                f"urgency must be one of: {', '.join(sorted(valid_urgencies))}"
            )

        with self.transaction():
            tutor = self.user_repository.get_with_role(tutor_id, RoleName.TUTOR.value)
            if not tutor:
                raise NotFoundException("Tutor not found")
            doubt = self.repository.create(
                student_id=actor.id,
                tutor_id=tutor_id,
                subject=subject_text,
                question=question_text,
                urgency=urgency,
                status=DoubtStatus.OPEN.value,
            )
            doubt_id = doubt.id

        prometheus_metrics.inc_doubt_event("submitted")
        self.log_operation("submit_doubt", doubt_id=doubt_id, tutor_id=tutor_id, urgency=urgency)
        return self._load(doubt_id)

    @BaseService.measure_operation("reply_to_doubt")
    def reply_to_doubt(self, actor: Actor, doubt_id: str, reply: str) -> Doubt:
        """
        Answer a doubt. Only the addressed tutor may reply, and only once.

        Raises:
            NotFoundException: Unknown doubt
            ForbiddenException: Actor is not the addressed tutor
            ValidationException: Empty reply
            AlreadyAnsweredException: The doubt already has a reply
        """
        doubt = self._load(doubt_id)
        if not isinstance(actor, TutorActor) or doubt.tutor_id != actor.id:
            raise ForbiddenException("Only the addressed tutor can reply to this doubt")

        reply_text = (reply or "").strip()
        if not reply_text:
            raise ValidationException("Reply must not be empty")
        if doubt.is_answered:
            raise AlreadyAnsweredException(doubt_id)

        with self.transaction():
            updated = self.repository.mark_answered(
                doubt_id,
                {
                    "status": DoubtStatus.ANSWERED.value,
                    "reply": reply_text,
                    "replied_at": datetime.now(timezone.utc),
                },
            )
            if updated == 0:
                raise AlreadyAnsweredException(doubt_id)

        prometheus_metrics.inc_doubt_event("answered")
        self.log_operation("reply_to_doubt", doubt_id=doubt_id)
        return self._load(doubt_id)

    @BaseService.measure_operation("list_doubts")
    def list_doubts(self, actor: Actor, status: Optional[str] = None) -> List[Doubt]:
        """Doubts the actor asked (student) or received (tutor), newest first."""
        if status is not None and status not in {s.value for s in DoubtStatus}:
            raise ValidationException("status must be one of: answered, open")
        return self.repository.list_for_user(actor.id, actor.role, status)

    def _load(self, doubt_id: str) -> Doubt:
        doubt = self.repository.get_by_id(doubt_id)
        if not doubt:
            raise NotFoundException("Doubt not found")
        return doubt
