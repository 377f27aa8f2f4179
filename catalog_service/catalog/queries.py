"""Catalog-specific query criteria.

Typed filters for the questions the product manager asks most often.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import and_, false

from catalog_service.catalog.models import (
    Product,
    ProductAttribute,
    ProductAttributeType,
    ProductCategory,
    ProductSpecification,
    same_identity,
)
from catalog_service.persistence.criteria import Criterion, Expression


@dataclass(frozen=True, eq=False)
class ChildCategoryOf(Criterion):
    """Matches categories whose direct parent is ``parent``."""

    parent: ProductCategory

    def is_satisfied_by(self, candidate: Any) -> bool:
        return same_identity(candidate.parent_category, self.parent)

    def to_expression(self, entity_type: type) -> Expression | None:
        if self.parent.id is None:
            return false()
        return ProductCategory.parent_category_id == self.parent.id


@dataclass(frozen=True, eq=False)
class InCategory(Criterion):
    """Matches products that belong to ``category``."""

    category: ProductCategory

    def is_satisfied_by(self, candidate: Any) -> bool:
        return same_identity(candidate.category, self.category)

    def to_expression(self, entity_type: type) -> Expression | None:
        if self.category.id is None:
            return false()
        return Product.category_id == self.category.id


@dataclass(frozen=True, eq=False)
class AttributeOfTypeInCategory(Criterion):
    """Matches attribute values of one type on products of one category."""

    attribute_type: ProductAttributeType
    category: ProductCategory

    def is_satisfied_by(self, candidate: Any) -> bool:
        if not same_identity(candidate.attribute_type, self.attribute_type):
            return False
        specification = candidate.specification
        if specification is None or specification.product is None:
            return False
        return same_identity(specification.product.category, self.category)

    def to_expression(self, entity_type: type) -> Expression | None:
        # unsaved entities own no rows
        if self.attribute_type.id is None or self.category.id is None:
            return false()
        return and_(
            ProductAttribute.attribute_type_id == self.attribute_type.id,
            ProductAttribute.specification.has(
                ProductSpecification.product.has(Product.category_id == self.category.id)
            ),
        )


@dataclass(frozen=True, eq=False)
class HasActiveAttribute(Criterion):
    """Matches products whose active specification carries a matching attribute.

    Evaluated in Python: the active version falls back to the latest one,
    which has no direct column to filter on.
    """

    attribute: ProductAttribute

    def is_satisfied_by(self, candidate: Any) -> bool:
        specification = candidate.active_specification
        if specification is None:
            return False
        return any(a.matches(self.attribute) for a in specification.attributes)
