"""SQLAlchemy-backed persistence.

Wraps a synchronous session. Criteria that translate to SQL are pushed
into the WHERE clause; the rest are evaluated lazily on the loaded rows.
"""

from collections.abc import Iterator
from typing import Any, TypeVar

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_service.persistence.base import PersistenceManager
from catalog_service.persistence.criteria import CollectionSearcher

logger = structlog.get_logger()

T = TypeVar("T")


class SqlAlchemyPersistenceManager(PersistenceManager):
    """Persistence manager over a SQLAlchemy session.

    Example usage:
        with get_session() as session:
            manager = ProductManager(SqlAlchemyPersistenceManager(session))
            products = manager.get_products()
    """

    def __init__(self, session: Session) -> None:
        """Initialize with database session.

        Args:
            session: SQLAlchemy session.
        """
        self.session = session

    def add(self, entity: Any) -> None:
        self.session.add(entity)

    def find_all(self, searcher: CollectionSearcher[T]) -> Iterator[T]:
        query = select(searcher.entity_type)
        expression = searcher.criterion.to_expression(searcher.entity_type)
        if expression is not None:
            query = query.where(expression)

        # staged entities stay invisible until commit
        with self.session.no_autoflush:
            rows = self.session.scalars(query).all()

        if expression is not None:
            return iter(rows)
        return (entity for entity in rows if searcher.criterion.is_satisfied_by(entity))

    def commit(self) -> None:
        """Commit the session.

        Raises:
            SQLAlchemyError: Propagated unchanged after rolling back.
        """
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Commit failed", error=str(exc))
            raise

    def rollback(self) -> None:
        """Discard staged changes."""
        self.session.rollback()
