"""SQLAlchemy models for the product catalog.

Defines attribute types, categories with their specification, products
and the append-only history of product specifications.

The same classes are used by every persistence backend: mapped instances
behave as plain Python objects until a session picks them up, so the
in-memory store works with them unchanged.
"""

import re
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_service.infrastructure.database import Base


class ProductAttributeType(Base):
    """A named, validated kind of attribute value (e.g. "Price").

    Attributes:
        id: Unique attribute type identifier.
        name: Machine name, unique case-insensitively.
        display_name: Human readable name.
        validation_pattern: Regular expression acceptable values must match.
    """

    __tablename__ = "product_attribute_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    validation_pattern: Mapped[str] = mapped_column(String(500), nullable=False)

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductAttributeType(id={self.id}, name={self.name})>"

    def accepts(self, value: str) -> bool:
        """Check a value against the validation pattern.

        The pattern carries its own anchors, so a search is used rather
        than a full match.

        Args:
            value: Candidate attribute value.

        Returns:
            True if the value matches the pattern.
        """
        return re.search(self.validation_pattern, value) is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "validation_pattern": self.validation_pattern,
        }


class ProductCategory(Base):
    """A category of products.

    The category specification lists the attribute types every product
    of this category is required to carry.

    Attributes:
        id: Unique category identifier.
        name: Category name.
        parent_category: Optional parent in the category tree.
        child_categories: Direct children in the category tree.
        specification: Required attributes for products of this category.
    """

    __tablename__ = "product_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    parent_category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("product_categories.id"),
        nullable=True,
        index=True,
    )

    # Relationships
    parent_category: Mapped[Optional["ProductCategory"]] = relationship(
        "ProductCategory",
        remote_side="ProductCategory.id",
        back_populates="child_categories",
    )
    child_categories: Mapped[list["ProductCategory"]] = relationship(
        "ProductCategory",
        back_populates="parent_category",
    )
    specification: Mapped[list["ProductCategorySpecificationAttribute"]] = relationship(
        "ProductCategorySpecificationAttribute",
        back_populates="product_category",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductCategory(id={self.id}, name={self.name})>"

    @property
    def required_attribute_types(self) -> list[ProductAttributeType]:
        """Attribute types a product of this category must carry."""
        return [attribute.attribute_type for attribute in self.specification]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "parent_category_id": (
                self.parent_category.id if self.parent_category is not None else None
            ),
            "specification": [a.to_dict() for a in self.specification],
        }


class ProductCategorySpecificationAttribute(Base):
    """One attribute requirement of a category specification.

    Attributes:
        id: Unique identifier.
        product_category: Owning category.
        attribute_type: Required attribute type.
    """

    __tablename__ = "product_category_specification_attributes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("product_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    attribute_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("product_attribute_types.id"),
        nullable=False,
    )

    # Relationships
    product_category: Mapped["ProductCategory"] = relationship(
        "ProductCategory",
        back_populates="specification",
    )
    attribute_type: Mapped["ProductAttributeType"] = relationship("ProductAttributeType")

    def __repr__(self) -> str:
        """String representation."""
        name = self.attribute_type.name if self.attribute_type is not None else None
        return f"<ProductCategorySpecificationAttribute(id={self.id}, attribute_type={name})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "attribute_type": self.attribute_type.name,
        }


class Product(Base):
    """A product and its specification history.

    Specifications are append-only: an update adds a new version and
    never mutates or removes an earlier one. The active specification is
    the designated version, or the latest one if none is designated.

    Attributes:
        id: Unique product identifier.
        category: Category this product belongs to.
        active_version: Version number of the active specification.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("product_categories.id"),
        nullable=False,
        index=True,
    )
    active_version: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Relationships
    category: Mapped["ProductCategory"] = relationship("ProductCategory")
    _specifications: Mapped[list["ProductSpecification"]] = relationship(
        "ProductSpecification",
        back_populates="product",
        order_by="ProductSpecification.version",
        cascade="all, delete-orphan",
    )

    def __init__(
        self,
        category: ProductCategory | None = None,
        specifications: Iterable["ProductSpecification"] = (),
        **kwargs: Any,
    ) -> None:
        """Initialize product.

        Args:
            category: Category of the product.
            specifications: Initial specification history, oldest first.
            **kwargs: Other mapped column values.
        """
        super().__init__(category=category, **kwargs)
        for specification in specifications:
            self.add_specification(specification)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, versions={len(self._specifications)})>"

    @property
    def specifications(self) -> tuple["ProductSpecification", ...]:
        """Specification history, oldest first."""
        return tuple(self._specifications)

    @property
    def active_specification(self) -> Optional["ProductSpecification"]:
        """Currently authoritative specification."""
        if not self._specifications:
            return None
        if self.active_version is not None:
            for specification in self._specifications:
                if specification.version == self.active_version:
                    return specification
        return self._specifications[-1]

    def add_specification(
        self,
        specification: "ProductSpecification",
        activate: bool = True,
    ) -> "ProductSpecification":
        """Append a specification to the history.

        Args:
            specification: New specification, not attached to any product.
            activate: Whether the new version becomes the active one.

        Returns:
            The appended specification with its version assigned.

        Raises:
            ValueError: If the specification already belongs to a product.
        """
        if specification.product is not None:
            raise ValueError("Specification already belongs to a product")

        specification.version = len(self._specifications) + 1
        if specification.created_at is None:
            specification.created_at = datetime.now(timezone.utc)
        self._specifications.append(specification)

        if activate:
            self.active_version = specification.version
        return specification

    def activate(self, version: int) -> "ProductSpecification":
        """Designate an existing version as the active specification.

        Args:
            version: Version number to activate.

        Returns:
            The activated specification.

        Raises:
            ValueError: If no specification has that version.
        """
        for specification in self._specifications:
            if specification.version == version:
                self.active_version = version
                return specification
        raise ValueError(f"Product {self.id} has no specification version {version}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "category": self.category.name if self.category is not None else None,
            "active_version": self.active_version,
            "specifications": [s.to_dict() for s in self._specifications],
        }


class ProductSpecification(Base):
    """One versioned snapshot of a product's attribute values.

    Attributes:
        id: Unique identifier.
        product: Owning product.
        version: 1-based position in the product history.
        created_at: When the version was appended.
        attributes: Attribute values of this snapshot.
    """

    __tablename__ = "product_specifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    product: Mapped["Product"] = relationship("Product", back_populates="_specifications")
    attributes: Mapped[list["ProductAttribute"]] = relationship(
        "ProductAttribute",
        back_populates="specification",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("product_id", "version", name="uq_specifications_product_version"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductSpecification(id={self.id}, version={self.version})>"

    def get_attribute(self, attribute_type: ProductAttributeType) -> Optional["ProductAttribute"]:
        """Get the attribute of a given type, if present."""
        for attribute in self.attributes:
            if same_identity(attribute.attribute_type, attribute_type):
                return attribute
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "version": self.version,
            "attributes": [a.to_dict() for a in self.attributes],
        }


class ProductAttribute(Base):
    """A single attribute value of a product specification.

    Transient instances double as filters for related-product queries.

    Attributes:
        id: Unique identifier.
        specification: Owning specification.
        attribute_type: Kind of value.
        value: Raw string value.
    """

    __tablename__ = "product_attributes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_specification_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("product_specifications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    attribute_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("product_attribute_types.id"),
        nullable=False,
        index=True,
    )
    value: Mapped[str] = mapped_column(String(1000), nullable=False)

    # Relationships
    specification: Mapped["ProductSpecification"] = relationship(
        "ProductSpecification",
        back_populates="attributes",
    )
    attribute_type: Mapped["ProductAttributeType"] = relationship("ProductAttributeType")

    def __repr__(self) -> str:
        """String representation."""
        name = self.attribute_type.name if self.attribute_type is not None else None
        return f"<ProductAttribute(type={name}, value={self.value!r})>"

    def matches(self, other: "ProductAttribute") -> bool:
        """Check whether another attribute carries the same type and value.

        Values are compared case-insensitively.

        Args:
            other: Attribute to compare with.

        Returns:
            True if both attributes match.
        """
        return (
            same_identity(self.attribute_type, other.attribute_type)
            and self.value.casefold() == other.value.casefold()
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "attribute_type": self.attribute_type.name if self.attribute_type else None,
            "value": self.value,
        }


def same_identity(left: Base | None, right: Base | None) -> bool:
    """Compare two entities by identity, falling back to object identity."""
    if left is None or right is None:
        return False
    if left is right:
        return True
    return left.id is not None and left.id == right.id
