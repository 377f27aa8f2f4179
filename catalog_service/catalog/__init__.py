"""Product Catalog.

Provides the catalog entities, the product manager that orchestrates
catalog reads and writes, typed query criteria and the baseline seeder.
"""

from catalog_service.catalog.manager import ProductManager
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
from catalog_service.catalog.seeder import CatalogSeeder

__all__ = [
    # Models
    "Product",
    "ProductAttribute",
    "ProductAttributeType",
    "ProductCategory",
    "ProductCategorySpecificationAttribute",
    "ProductSpecification",
    # Queries
    "AttributeOfTypeInCategory",
    "ChildCategoryOf",
    "HasActiveAttribute",
    "InCategory",
    # Manager
    "ProductManager",
    # Seeder
    "CatalogSeeder",
]
