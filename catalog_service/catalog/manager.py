"""Product manager for catalog operations.

High-level service that combines persistence operations with the
catalog's business rules: unique attribute type names, well-formed
validation patterns and append-only product history.
"""

import re
from collections.abc import Callable, Iterable, Iterator
from typing import Any

import structlog

from catalog_service.catalog.models import (
    Product,
    ProductAttribute,
    ProductAttributeType,
    ProductCategory,
    ProductCategorySpecificationAttribute,
    ProductSpecification,
)
from catalog_service.catalog.queries import (
    AttributeOfTypeInCategory,
    ChildCategoryOf,
    HasActiveAttribute,
    InCategory,
)
from catalog_service.domain.exceptions import (
    DuplicateAttributeTypeError,
    InvalidAttributeValueError,
    InvalidValidationPatternError,
    ProductNotFoundError,
    UnknownAttributeTypeError,
)
from catalog_service.infrastructure.config import settings
from catalog_service.persistence.base import PersistenceManager
from catalog_service.persistence.criteria import (
    CollectionSearcher,
    Criterion,
    FieldEquals,
    FieldEqualsIgnoreCase,
    MatchAll,
    Searcher,
)

logger = structlog.get_logger()

ProductPredicate = Criterion | Callable[[Product], Any]


class ProductManager:
    """Service for catalog operations.

    Every write is persisted immediately: the entity is added and the
    persistence manager committed as one unit.

    Example usage:
        manager = ProductManager(InMemoryPersistenceManager())

        price = manager.create_attribute_type("Price", "Product Price", r"^\\d+\\.\\d{2}$")
        category = manager.create_product_category("Default Product", [price])
        product = manager.create_product(
            ProductSpecification(
                attributes=[ProductAttribute(attribute_type=price, value="9.99")]
            ),
            category,
        )

        related = manager.get_related_products(
            ProductAttribute(attribute_type=price, value="9.99")
        )
    """

    def __init__(
        self,
        persistence: PersistenceManager,
        enforce_attribute_patterns: bool | None = None,
    ) -> None:
        """Initialize manager with a persistence manager.

        Args:
            persistence: Storage used for every operation.
            enforce_attribute_patterns: Validate attribute values against
                their type's pattern on write. Defaults to the
                ``enforce_attribute_patterns`` setting.
        """
        self._persistence = persistence
        if enforce_attribute_patterns is None:
            enforce_attribute_patterns = settings.enforce_attribute_patterns
        self.enforce_attribute_patterns = enforce_attribute_patterns

    # ========================================================================
    # Categories
    # ========================================================================

    def create_product_category(
        self,
        name: str,
        specification: Iterable[
            ProductCategorySpecificationAttribute | ProductAttributeType
        ] = (),
        parent: ProductCategory | None = None,
    ) -> ProductCategory:
        """Build a new category and save it.

        Category names are not checked for uniqueness.

        Args:
            name: Name of the category.
            specification: Attributes required for products of this
                category. Bare attribute types are wrapped.
            parent: Optional parent category.

        Returns:
            The new category.

        Raises:
            UnknownAttributeTypeError: If a required attribute type has not
                been created through this catalog.
        """
        requirements = [_as_requirement(item) for item in specification]
        for requirement in requirements:
            self._ensure_stored(requirement.attribute_type)

        category = ProductCategory(
            name=name,
            parent_category=parent,
            specification=requirements,
        )

        self._persistence.add(category)
        self._persistence.commit()

        logger.info(
            "Product category created",
            category_id=category.id,
            name=name,
            required_attributes=[t.name for t in category.required_attribute_types],
        )
        return category

    def get_product_categories(self) -> list[ProductCategory]:
        """Get all categories."""
        return list(self._persistence.find_all(CollectionSearcher(ProductCategory)))

    def get_child_categories(self, parent: ProductCategory) -> list[ProductCategory]:
        """Get the direct children of a category.

        Args:
            parent: Parent category.

        Returns:
            Child categories.
        """
        return list(
            self._persistence.find_all(
                CollectionSearcher(ProductCategory, ChildCategoryOf(parent))
            )
        )

    def get_product_category(self, category_id: int) -> ProductCategory | None:
        """Get category by ID.

        Args:
            category_id: Category ID.

        Returns:
            Category if exactly one matches.
        """
        return self._persistence.find(
            Searcher(ProductCategory, FieldEquals("id", category_id))
        )

    def get_product_category_by_name(self, name: str) -> ProductCategory | None:
        """Get category by name, ignoring case.

        Args:
            name: Category name.

        Returns:
            Category if exactly one matches.
        """
        return self._persistence.find(
            Searcher(ProductCategory, FieldEqualsIgnoreCase("name", name))
        )

    # ========================================================================
    # Attribute Types
    # ========================================================================

    def create_attribute_type(
        self,
        name: str,
        display_name: str,
        validation_pattern: str,
    ) -> ProductAttributeType:
        """Build a new attribute type and save it.

        Args:
            name: Name of the attribute type, unique ignoring case.
            display_name: Human readable name.
            validation_pattern: Regular expression attribute values of this
                type should match.

        Returns:
            The new attribute type.

        Raises:
            DuplicateAttributeTypeError: If the name is already taken.
            InvalidValidationPatternError: If the pattern does not compile.
        """
        existing = self._persistence.find_all(
            CollectionSearcher(ProductAttributeType, FieldEqualsIgnoreCase("name", name))
        )
        if next(existing, None) is not None:
            logger.warning("Duplicate attribute type rejected", name=name)
            raise DuplicateAttributeTypeError(name)

        try:
            re.match(validation_pattern, "")
        except re.error as exc:
            logger.warning(
                "Invalid validation pattern rejected",
                name=name,
                pattern=validation_pattern,
                error=str(exc),
            )
            raise InvalidValidationPatternError(validation_pattern, name, str(exc)) from exc

        attribute_type = ProductAttributeType(
            name=name,
            display_name=display_name,
            validation_pattern=validation_pattern,
        )

        self._persistence.add(attribute_type)
        self._persistence.commit()

        logger.info(
            "Product attribute type created",
            attribute_type_id=attribute_type.id,
            name=name,
        )
        return attribute_type

    def get_product_attribute_types(self) -> list[ProductAttributeType]:
        """Get all attribute types."""
        return list(self._persistence.find_all(CollectionSearcher(ProductAttributeType)))

    def get_product_attribute_type(self, attribute_type_id: int) -> ProductAttributeType | None:
        """Get attribute type by ID.

        Args:
            attribute_type_id: Attribute type ID.

        Returns:
            Attribute type if exactly one matches.
        """
        return self._persistence.find(
            Searcher(ProductAttributeType, FieldEquals("id", attribute_type_id))
        )

    def get_product_attribute_type_by_name(self, name: str) -> ProductAttributeType | None:
        """Get attribute type by name, ignoring case.

        Args:
            name: Attribute type name.

        Returns:
            Attribute type if exactly one matches.
        """
        return self._persistence.find(
            Searcher(ProductAttributeType, FieldEqualsIgnoreCase("name", name))
        )

    def get_unique_product_attributes(
        self,
        category: ProductCategory,
        attribute_type: ProductAttributeType,
    ) -> list[ProductAttribute]:
        """Get the distinct values of one attribute type within a category.

        Values are compared ignoring case; the first occurrence is kept.

        Args:
            category: Category the products must belong to.
            attribute_type: Attribute type to collect values for.

        Returns:
            Attributes with distinct values.
        """
        attributes = self._persistence.find_all(
            CollectionSearcher(
                ProductAttribute,
                AttributeOfTypeInCategory(attribute_type, category),
            )
        )

        seen: set[str] = set()
        unique: list[ProductAttribute] = []
        for attribute in attributes:
            key = attribute.value.casefold()
            if key not in seen:
                seen.add(key)
                unique.append(attribute)
        return unique

    # ========================================================================
    # Products
    # ========================================================================

    def create_product(
        self,
        specification: ProductSpecification,
        category: ProductCategory,
    ) -> Product:
        """Build a new product and save it.

        Args:
            specification: Attributes of the new product, its first version.
            category: Category of the new product.

        Returns:
            The new product.

        Raises:
            InvalidAttributeValueError: If pattern enforcement is on and a
                value does not match its type.
        """
        if self.enforce_attribute_patterns:
            self._validate_values(specification)

        product = Product(category=category, specifications=[specification])

        self._persistence.add(product)
        self._persistence.commit()

        logger.info(
            "Product created",
            product_id=product.id,
            category=category.name,
            attributes=len(specification.attributes),
        )
        return product

    def update_product(
        self,
        product: Product,
        updated_specification: ProductSpecification,
    ) -> Product:
        """Append an updated specification to a product.

        The product is re-fetched by ID rather than trusting the caller's
        instance. Earlier specifications are left untouched.

        Args:
            product: Product to update.
            updated_specification: New specification, becomes active.

        Returns:
            The refreshed product.

        Raises:
            ProductNotFoundError: If the product ID no longer resolves.
            InvalidAttributeValueError: If pattern enforcement is on and a
                value does not match its type.
        """
        product_to_update = self.get_product(product.id)
        if product_to_update is None:
            logger.warning("Update of unknown product rejected", product_id=product.id)
            raise ProductNotFoundError(product.id)

        if self.enforce_attribute_patterns:
            self._validate_values(updated_specification)

        product_to_update.add_specification(updated_specification)
        self._persistence.commit()

        logger.info(
            "Product updated",
            product_id=product_to_update.id,
            version=updated_specification.version,
        )
        return product_to_update

    def get_products(self, predicate: ProductPredicate | None = None) -> list[Product]:
        """Get all products, optionally filtered.

        Args:
            predicate: Criterion or callable products must satisfy.

        Returns:
            Matching products.
        """
        criterion = MatchAll() if predicate is None else predicate
        return list(self._persistence.find_all(CollectionSearcher(Product, criterion)))

    def get_product(self, product_id: int) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if exactly one matches.
        """
        return self._persistence.find(Searcher(Product, FieldEquals("id", product_id)))

    def get_product_matching(self, predicate: ProductPredicate) -> Product | None:
        """Get the single product satisfying a predicate.

        Args:
            predicate: Criterion or callable the product must satisfy.

        Returns:
            Product if exactly one matches.
        """
        return self._persistence.find(Searcher(Product, predicate))

    def get_related_products(
        self,
        *attributes: ProductAttribute,
        category: ProductCategory | None = None,
    ) -> list[Product]:
        """Get products sharing every given attribute.

        A product matches when its active specification carries, for each
        filter, an attribute of the same type with the same value
        (ignoring case). With no filters every product matches.

        Args:
            *attributes: Attribute filters, combined as an intersection.
            category: Optional category the products must belong to.

        Returns:
            Matching products.
        """
        base = MatchAll() if category is None else InCategory(category)
        candidates: Iterator[Product] = self._persistence.find_all(
            CollectionSearcher(Product, base)
        )
        for attribute in attributes:
            candidates = filter(HasActiveAttribute(attribute).is_satisfied_by, candidates)
        return list(candidates)

    # ========================================================================
    # Helpers
    # ========================================================================

    def _ensure_stored(self, attribute_type: ProductAttributeType | None) -> None:
        attribute_type_id = getattr(attribute_type, "id", None)
        if attribute_type_id is None or self.get_product_attribute_type(attribute_type_id) is None:
            name = getattr(attribute_type, "name", None)
            logger.warning(
                "Unknown attribute type rejected",
                name=name,
                attribute_type_id=attribute_type_id,
            )
            raise UnknownAttributeTypeError(name, attribute_type_id)

    def _validate_values(self, specification: ProductSpecification) -> None:
        for attribute in specification.attributes:
            attribute_type = attribute.attribute_type
            if not attribute_type.accepts(attribute.value):
                raise InvalidAttributeValueError(
                    attribute_type.name,
                    attribute.value,
                    attribute_type.validation_pattern,
                )


def _as_requirement(
    item: ProductCategorySpecificationAttribute | ProductAttributeType,
) -> ProductCategorySpecificationAttribute:
    if isinstance(item, ProductAttributeType):
        return ProductCategorySpecificationAttribute(attribute_type=item)
    return item
