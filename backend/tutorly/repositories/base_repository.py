# backend/tutorly/repositories/base_repository.py
"""
Base Repository for the Tutorly platform.

Typed access to one mapped model: lookup by ULID, insert and delete.
Repositories only flush; the service that owns the unit of work commits.
A failed write rolls the session back and surfaces as RepositoryException.
"""

from contextlib import contextmanager
import logging
from typing import Generic, Iterator, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Shared data access for a single model.

    Attributes:
        db: SQLAlchemy session owned by the calling service
        model: mapped class handled by this repository
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    @contextmanager
    def _write(self, action: str) -> Iterator[None]:
        """Flush-time failures roll back and become RepositoryException."""
        name = self.model.__name__
        try:
            yield
        except IntegrityError as exc:
            self.logger.error("Integrity error on %s %s: %s", action, name, exc.orig)
            self.db.rollback()
            raise RepositoryException(f"Integrity constraint violated on {action} {name}") from exc
        except SQLAlchemyError as exc:
            self.logger.error("Database error on %s %s: %s", action, name, exc)
            self.db.rollback()
            raise RepositoryException(f"Failed to {action} {name}") from exc

    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[T]:
        """Fetch by primary key, eager loading whatever the subclass asks for."""
        query = self.db.query(self.model).filter(self.model.id == id)  # type: ignore[attr-defined]
        if load_relationships:
            query = self._apply_eager_loading(query)
        try:
            return query.first()
        except SQLAlchemyError as exc:
            self.logger.error("Error loading %s %s: %s", self.model.__name__, id, exc)
            raise RepositoryException(f"Failed to retrieve {self.model.__name__}") from exc

    def create(self, **kwargs) -> T:
        """Add and flush so the ULID and defaults are populated. Does not commit."""
        with self._write("create"):
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()
        return entity

    def flush(self) -> None:
        self.db.flush()

    def delete(self, id: str) -> bool:
        """Returns False when nothing has that id."""
        entity = self.get_by_id(id, load_relationships=False)
        if entity is None:
            return False
        with self._write("delete"):
            self.db.delete(entity)
            self.db.flush()
        return True

    def _apply_eager_loading(self, query: Query) -> Query:
        """Override in subclasses to add loader options."""
        return query
