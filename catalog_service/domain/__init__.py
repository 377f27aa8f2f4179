"""Domain layer - catalog business rule violations.

Example usage:
    from catalog_service.domain import DuplicateAttributeTypeError

    try:
        manager.create_attribute_type("Price", "Product Price", "^[0-9]+$")
    except DuplicateAttributeTypeError as exc:
        print(exc.details["name"])
"""

from catalog_service.domain.exceptions import (
    CatalogError,
    DuplicateAttributeTypeError,
    InvalidAttributeValueError,
    InvalidValidationPatternError,
    ProductNotFoundError,
    UnknownAttributeTypeError,
)

__all__ = [
    "CatalogError",
    "DuplicateAttributeTypeError",
    "InvalidAttributeValueError",
    "InvalidValidationPatternError",
    "ProductNotFoundError",
    "UnknownAttributeTypeError",
]
