"""Catalog seeding.

Inserts or updates the baseline reference data every catalog starts
with. Each seed action is idempotent: records are matched by name
(ignoring case) and updated in place when they already exist.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

import structlog

from catalog_service.catalog.models import (
    ProductAttributeType,
    ProductCategory,
    ProductCategorySpecificationAttribute,
    same_identity,
)
from catalog_service.persistence.base import PersistenceManager
from catalog_service.persistence.criteria import (
    CollectionSearcher,
    FieldEqualsIgnoreCase,
)

logger = structlog.get_logger()

T = TypeVar("T")

SeedAction = Callable[[PersistenceManager], None]

DEFAULT_CATEGORY_NAME = "Default Product"


@dataclass(frozen=True)
class AttributeTypeSeed:
    """Baseline attribute type definition."""

    name: str
    display_name: str
    validation_pattern: str


DEFAULT_ATTRIBUTE_TYPES: tuple[AttributeTypeSeed, ...] = (
    AttributeTypeSeed("Price", "Product Price", r"^\d+[.]{1}(\d){2}$"),
    AttributeTypeSeed("Name", "Product Name", r"^.+$"),
)


def _find_by_name(persistence: PersistenceManager, entity_type: type[T], name: str) -> T | None:
    # first match wins so that a store with duplicate names still seeds
    matches = persistence.find_all(
        CollectionSearcher(entity_type, FieldEqualsIgnoreCase("name", name))
    )
    return next(matches, None)


def add_product_attribute_types(persistence: PersistenceManager) -> None:
    """Upsert the default attribute types.

    Args:
        persistence: Store to seed.
    """
    for seed in DEFAULT_ATTRIBUTE_TYPES:
        attribute_type = _find_by_name(persistence, ProductAttributeType, seed.name)
        if attribute_type is None:
            persistence.add(
                ProductAttributeType(
                    name=seed.name,
                    display_name=seed.display_name,
                    validation_pattern=seed.validation_pattern,
                )
            )
            logger.info("Seeded attribute type", name=seed.name)
        else:
            attribute_type.display_name = seed.display_name
            attribute_type.validation_pattern = seed.validation_pattern

    persistence.commit()


def add_default_category(persistence: PersistenceManager) -> None:
    """Upsert the default category requiring ``Name`` and ``Price``.

    Args:
        persistence: Store to seed. Attribute types must already exist.

    Raises:
        LookupError: If a required attribute type has not been seeded.
    """
    required = []
    for name in ("Name", "Price"):
        attribute_type = _find_by_name(persistence, ProductAttributeType, name)
        if attribute_type is None:
            raise LookupError(f"Attribute type [{name}] must be seeded first")
        required.append(attribute_type)

    category = _find_by_name(persistence, ProductCategory, DEFAULT_CATEGORY_NAME)
    if category is None:
        category = ProductCategory(name=DEFAULT_CATEGORY_NAME)
        persistence.add(category)
        logger.info("Seeded category", name=DEFAULT_CATEGORY_NAME)

    present = category.required_attribute_types
    for attribute_type in required:
        if not any(same_identity(t, attribute_type) for t in present):
            category.specification.append(
                ProductCategorySpecificationAttribute(attribute_type=attribute_type)
            )

    persistence.commit()


class CatalogSeeder:
    """Runs an ordered sequence of seed actions.

    Example usage:
        CatalogSeeder().run(SqlAlchemyPersistenceManager(session))
    """

    def __init__(self, seed_actions: Sequence[SeedAction] | None = None) -> None:
        """Initialize seeder.

        Args:
            seed_actions: Actions to run in order, defaults to the
                baseline attribute types followed by the default category.
        """
        if seed_actions is None:
            seed_actions = [add_product_attribute_types, add_default_category]
        self._seed_actions = list(seed_actions)

    @property
    def seed_actions(self) -> list[SeedAction]:
        """Seed actions in execution order."""
        return list(self._seed_actions)

    def run(self, persistence: PersistenceManager) -> None:
        """Run every seed action against a store.

        Args:
            persistence: Store to seed.
        """
        for action in self._seed_actions:
            logger.debug("Running seed action", action=getattr(action, "__name__", repr(action)))
            action(persistence)
        logger.info("Catalog seeded", actions=len(self._seed_actions))
