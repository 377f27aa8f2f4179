"""Tests for database bootstrap."""

from sqlalchemy import Engine, create_engine, inspect, select
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from catalog_service.bootstrap import create_tables, initialise_database
from catalog_service.catalog.models import ProductAttributeType, ProductCategory
from catalog_service.catalog.seeder import CatalogSeeder


def make_engine() -> Engine:
    """Create an empty in-memory SQLite engine."""
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def test_create_tables() -> None:
    """Every catalog table is created."""
    engine = make_engine()

    create_tables(engine)

    assert set(inspect(engine).get_table_names()) == {
        "product_attribute_types",
        "product_categories",
        "product_category_specification_attributes",
        "products",
        "product_specifications",
        "product_attributes",
    }


def test_initialise_with_seed() -> None:
    """Initialising seeds the baseline catalog."""
    engine = make_engine()

    initialise_database(engine, seed=True)
    initialise_database(engine, seed=True)

    with Session(engine) as session:
        names = session.scalars(select(ProductAttributeType.name)).all()
        categories = session.scalars(select(ProductCategory.name)).all()
    assert sorted(names) == ["Name", "Price"]
    assert categories == ["Default Product"]


def test_initialise_without_seed() -> None:
    """Seeding can be skipped."""
    engine = make_engine()

    initialise_database(engine, seed=False)

    with Session(engine) as session:
        assert session.scalars(select(ProductAttributeType)).all() == []


def test_initialise_with_custom_seeder() -> None:
    """A custom seeder replaces the baseline actions."""
    engine = make_engine()
    calls: list[str] = []

    initialise_database(engine, seeder=CatalogSeeder([lambda p: calls.append("seeded")]), seed=True)

    assert calls == ["seeded"]
