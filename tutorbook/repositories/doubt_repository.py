# tutorbook/repositories/doubt_repository.py
"""
Doubt Repository for the TutorBook Platform

Data access for stand-alone student questions and tutor replies.
"""

import logging
from typing import Any, Dict, List, Optional, cast

from sqlalchemy import desc
from sqlalchemy.orm import Query, Session, joinedload

from ..core.enums import RoleName
from ..core.exceptions import RepositoryException
from ..models.doubt import Doubt, DoubtStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class DoubtRepository(BaseRepository[Doubt]):
    """Repository for doubt data access."""

    def __init__(self, db: Session):
        super().__init__(db, Doubt)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(Doubt.student), joinedload(Doubt.tutor))

    def list_for_user(
        self,
        user_id: str,
        role: str,
        status: Optional[str] = None,
        limit: int = 100,
    ) -> List[Doubt]:
        """Doubts asked by a student or addressed to a tutor, newest first."""
        try:
            column = Doubt.tutor_id if role == RoleName.TUTOR.value else Doubt.student_id
            query = self._apply_eager_loading(self.db.query(Doubt).filter(column == user_id))
            if status:
                query = query.filter(Doubt.status == status)
            query = query.order_by(desc(Doubt.created_at), desc(Doubt.id))
            return cast(List[Doubt], query.limit(limit).all())
        except Exception as e:
            self.logger.error(f"Error listing doubts for {role} {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list doubts: {str(e)}")

    def mark_answered(self, doubt_id: str, values: Dict[str, Any]) -> int:
        """Set the reply only while the doubt is still open."""
        return self.update_where(doubt_id, [Doubt.status == DoubtStatus.OPEN.value], values)
