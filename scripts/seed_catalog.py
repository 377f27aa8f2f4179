#!/usr/bin/env python3
"""Seed product catalog script.

Creates the catalog tables on the configured database and seeds the
baseline attribute types and default category.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --database-url sqlite:///./catalog.db
    python scripts/seed_catalog.py --no-seed
"""

import argparse

from sqlalchemy import create_engine

from catalog_service.bootstrap import initialise_database
from catalog_service.infrastructure.config import settings
from catalog_service.infrastructure.logging import configure_logging


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Create catalog tables and seed baseline data",
    )
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help=f"SQLAlchemy database URL (default: {settings.database_url})",
    )
    parser.add_argument(
        "--no-seed",
        action="store_true",
        help="Only create tables, don't seed baseline data",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Log level (default: %(default)s)",
    )

    args = parser.parse_args()
    configure_logging(level=args.log_level)

    print("=" * 60)
    print("Catalog Seeder")
    print("=" * 60)

    engine = create_engine(args.database_url, echo=settings.debug)
    try:
        initialise_database(engine, seed=not args.no_seed)
    finally:
        engine.dispose()

    print("Seeding complete!" if not args.no_seed else "Tables ready.")
    print("=" * 60)


if __name__ == "__main__":
    main()
