"""Database configuration and session management.

Provides the SQLAlchemy engine, session factory and declarative base.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from catalog_service.infrastructure.config import settings

# Create engine
engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

# Session factory
session_factory = sessionmaker(
    engine,
    class_=Session,
    expire_on_commit=False,
)

# Base class for models
Base = declarative_base()


@contextmanager
def get_session(factory: sessionmaker | None = None) -> Iterator[Session]:
    """Get database session.

    Commits when the block exits cleanly, rolls back and re-raises otherwise.

    Args:
        factory: Session factory to use, defaults to the module factory.

    Yields:
        Session for database operations.
    """
    with (factory or session_factory)() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
