"""Domain exceptions.

All catalog-level errors that represent business rule violations.
They are raised by the product manager before anything is written,
so a failed operation never leaves partial state behind.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog exceptions.

    All catalog errors inherit from this class to allow catching
    catalog-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize catalog error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Attribute Type Errors
# ============================================================================


class DuplicateAttributeTypeError(CatalogError):
    """Raised when an attribute type with the same name already exists.

    Names are compared case-insensitively.
    """

    def __init__(self, name: str) -> None:
        """Initialize duplicate attribute type error.

        Args:
            name: The conflicting attribute type name.
        """
        super().__init__(
            f"A Product Attribute type with the name [{name}] already exists.",
            details={"name": name},
        )


class InvalidValidationPatternError(CatalogError, ValueError):
    """Raised when an attribute type's validation pattern does not compile."""

    def __init__(self, pattern: str, attribute_type: str, error: str) -> None:
        """Initialize invalid validation pattern error.

        Args:
            pattern: The offending regular expression.
            attribute_type: Name of the attribute type being created.
            error: Message of the underlying compilation error.
        """
        super().__init__(
            f"The regular expression [{pattern}] to validate the product attribute "
            f"type [{attribute_type}] is not a valid regular expression.",
            details={
                "pattern": pattern,
                "attribute_type": attribute_type,
                "error": error,
            },
        )


class UnknownAttributeTypeError(CatalogError, ValueError):
    """Raised when a category requires an attribute type that was never stored.

    Attribute types must be created through the product manager so that
    their name and validation pattern are checked.
    """

    def __init__(self, name: str | None, attribute_type_id: int | None) -> None:
        """Initialize unknown attribute type error.

        Args:
            name: Name of the attribute type, if any.
            attribute_type_id: ID of the attribute type, None when unsaved.
        """
        super().__init__(
            f"The product attribute type [{name}] has not been created.",
            details={"name": name, "attribute_type_id": attribute_type_id},
        )


class InvalidAttributeValueError(CatalogError, ValueError):
    """Raised when an attribute value does not match its type's pattern."""

    def __init__(self, attribute_type: str, value: str, pattern: str) -> None:
        """Initialize invalid attribute value error.

        Args:
            attribute_type: Name of the attribute type.
            value: The rejected value.
            pattern: The validation pattern the value failed.
        """
        super().__init__(
            f"Value [{value}] is not valid for product attribute type "
            f"[{attribute_type}] (pattern [{pattern}]).",
            details={
                "attribute_type": attribute_type,
                "value": value,
                "pattern": pattern,
            },
        )


# ============================================================================
# Product Errors
# ============================================================================


class ProductNotFoundError(CatalogError, LookupError):
    """Raised when a product id no longer resolves to a stored product."""

    def __init__(self, product_id: int | None) -> None:
        """Initialize product not found error.

        Args:
            product_id: ID of the missing product.
        """
        super().__init__(
            f"Product {product_id} not found",
            details={"product_id": product_id},
        )
