"""Database bootstrap.

Brings a database up to the current schema and seeds the baseline
catalog data, the way the application does on first start.
"""

import structlog
from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from catalog_service.catalog import models  # noqa: F401  registers tables
from catalog_service.catalog.seeder import CatalogSeeder
from catalog_service.infrastructure.config import settings
from catalog_service.infrastructure.database import Base, engine, get_session
from catalog_service.persistence.orm import SqlAlchemyPersistenceManager

logger = structlog.get_logger()


def create_tables(bind: Engine | None = None) -> None:
    """Create database tables if they don't exist.

    Args:
        bind: Engine to use, defaults to the configured engine.
    """
    Base.metadata.create_all(bind or engine)


def initialise_database(
    bind: Engine | None = None,
    seeder: CatalogSeeder | None = None,
    seed: bool | None = None,
) -> None:
    """Create the schema and optionally seed it.

    Args:
        bind: Engine to use, defaults to the configured engine.
        seeder: Seeder to run, defaults to the baseline catalog seeder.
        seed: Whether to seed, defaults to ``settings.seed_on_initialise``.
    """
    bind = bind or engine
    create_tables(bind)

    if seed is None:
        seed = settings.seed_on_initialise

    if seed:
        factory = sessionmaker(bind, expire_on_commit=False)
        with get_session(factory) as session:
            (seeder or CatalogSeeder()).run(SqlAlchemyPersistenceManager(session))

    logger.info(
        "Database initialised",
        version=settings.app_version,
        url=bind.url.render_as_string(),
        seeded=seed,
    )
