# tutorbook/repositories/base_repository.py
"""
Shared data access for TutorBook repositories.

Records are created once and afterwards only change through conditional
UPDATEs, so the base class carries exactly three operations: load by id,
insert, and update-if-still-in-state. Repositories flush but never commit;
the owning service decides the transaction boundary.
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Base for the per-table repositories.

    Attributes:
        db: SQLAlchemy session owned by the calling service
        model: Mapped class this repository reads and writes
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[T]:
        """
        Load one row by primary key, or None.

        The row is re-read from the database even when the session already
        holds it, so a caller sees the outcome of an earlier ``update_where``.
        """
        try:
            query = self.db.query(self.model).filter(self.model.id == id)
            if load_relationships:
                query = self._apply_eager_loading(query)
            return query.populate_existing().first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading {self.model.__name__} {id}: {str(e)}")
            raise RepositoryException(f"Failed to load {self.model.__name__}: {str(e)}")

    def create(self, **kwargs) -> T:
        """Insert a row and flush it so generated columns are populated."""
        entity = self.model(**kwargs)
        try:
            self.db.add(entity)
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error inserting {self.model.__name__}: {str(e)}", exc_info=True)
            self.db.rollback()
            raise RepositoryException(f"Failed to create {self.model.__name__}: {str(e)}") from e
        return entity

    def update_where(self, id: str, conditions: List[Any], values: Dict[str, Any]) -> int:
        """
        UPDATE the row with ``id`` only where every condition still holds.

        Returns:
            Rows changed, 0 or 1
        """
        try:
            rowcount = (
                self.db.query(self.model)
                .filter(self.model.id == id, *conditions)
                .update(values, synchronize_session=False)
            )
            self.db.flush()
            return int(rowcount or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating {self.model.__name__} {id}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to update {self.model.__name__}: {str(e)}")

    def _apply_eager_loading(self, query: Query) -> Query:
        """Hook for subclasses that want relationships loaded with the row."""
        return query
