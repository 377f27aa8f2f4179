"""Shared fixtures for catalog tests.

Manager tests run against both persistence backends: the in-memory store
and SQLAlchemy on an in-memory SQLite database.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from catalog_service.catalog.manager import ProductManager
from catalog_service.catalog.models import (
    Product,
    ProductAttribute,
    ProductAttributeType,
    ProductCategory,
    ProductSpecification,
)
from catalog_service.infrastructure.database import Base
from catalog_service.persistence.base import PersistenceManager
from catalog_service.persistence.memory import InMemoryPersistenceManager
from catalog_service.persistence.orm import SqlAlchemyPersistenceManager


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def engine() -> Iterator[Engine]:
    """Create an in-memory SQLite engine with the catalog schema."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    """Create a session bound to the test engine."""
    with Session(engine, expire_on_commit=False) as session:
        yield session


# ============================================================================
# Persistence Fixtures
# ============================================================================


class RecordingPersistenceManager(InMemoryPersistenceManager):
    """In-memory store that counts writes."""

    def __init__(self) -> None:
        super().__init__()
        self.adds = 0
        self.commits = 0

    def add(self, entity: Any) -> None:
        self.adds += 1
        super().add(entity)

    def commit(self) -> None:
        self.commits += 1
        super().commit()


@pytest.fixture
def recording_persistence() -> RecordingPersistenceManager:
    """Create an in-memory store that counts adds and commits."""
    return RecordingPersistenceManager()


@pytest.fixture(params=["memory", "sqlalchemy"])
def persistence(request: pytest.FixtureRequest) -> PersistenceManager:
    """Create a persistence manager for each backend."""
    if request.param == "memory":
        return InMemoryPersistenceManager()
    return SqlAlchemyPersistenceManager(request.getfixturevalue("session"))


@pytest.fixture
def manager(persistence: PersistenceManager) -> ProductManager:
    """Create a product manager without value pattern enforcement."""
    return ProductManager(persistence, enforce_attribute_patterns=False)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@dataclass
class SampleCatalog:
    """Attribute types and category shared by manager tests."""

    name: ProductAttributeType
    price: ProductAttributeType
    colour: ProductAttributeType
    category: ProductCategory


@pytest.fixture
def catalog(manager: ProductManager) -> SampleCatalog:
    """Create Name, Price and Colour attribute types and a default category."""
    name = manager.create_attribute_type("Name", "Product Name", r"^.+$")
    price = manager.create_attribute_type("Price", "Product Price", r"^\d+\.\d{2}$")
    colour = manager.create_attribute_type("Colour", "Product Colour", r"^[A-Za-z ]+$")
    category = manager.create_product_category("Default Product", [name, price])
    return SampleCatalog(name=name, price=price, colour=colour, category=category)


def make_specification(*values: tuple[ProductAttributeType, str]) -> ProductSpecification:
    """Create a specification from (attribute type, value) pairs."""
    return ProductSpecification(
        attributes=[
            ProductAttribute(attribute_type=attribute_type, value=value)
            for attribute_type, value in values
        ]
    )


def make_filter(attribute_type: ProductAttributeType, value: str) -> ProductAttribute:
    """Create a transient attribute used as a related-product filter."""
    return ProductAttribute(attribute_type=attribute_type, value=value)


def product_ids(products: list[Product]) -> set[int]:
    """Collect product IDs."""
    return {product.id for product in products}
