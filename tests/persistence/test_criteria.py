"""Tests for storage-agnostic query criteria."""

import pytest
from sqlalchemy.dialects import sqlite

from catalog_service.catalog.models import (
    Product,
    ProductAttribute,
    ProductAttributeType,
    ProductCategory,
    ProductSpecification,
)
from catalog_service.catalog.queries import (
    AttributeOfTypeInCategory,
    ChildCategoryOf,
    HasActiveAttribute,
    InCategory,
)
from catalog_service.persistence.criteria import (
    AllOf,
    AnyOf,
    CollectionSearcher,
    FieldEquals,
    FieldEqualsIgnoreCase,
    MatchAll,
    Not,
    Predicate,
    Searcher,
)


@pytest.fixture
def price() -> ProductAttributeType:
    """Create a price attribute type."""
    return ProductAttributeType(
        id=1,
        name="Price",
        display_name="Product Price",
        validation_pattern=r"^\d+\.\d{2}$",
    )


@pytest.fixture
def product(price: ProductAttributeType) -> Product:
    """Create a product in the Tools category."""
    category = ProductCategory(id=10, name="Tools")
    return Product(
        id=100,
        category=category,
        specifications=[
            ProductSpecification(
                attributes=[ProductAttribute(attribute_type=price, value="9.99")]
            )
        ],
    )


class TestLeafCriteria:
    """Tests for in-memory evaluation of leaf criteria."""

    def test_match_all(self, price: ProductAttributeType) -> None:
        """MatchAll accepts anything."""
        assert MatchAll().is_satisfied_by(price)
        assert MatchAll() == MatchAll()

    def test_field_equals(self, price: ProductAttributeType) -> None:
        """Equality is exact."""
        assert FieldEquals("id", 1).is_satisfied_by(price)
        assert not FieldEquals("name", "price").is_satisfied_by(price)

    def test_field_equals_ignore_case(self, price: ProductAttributeType) -> None:
        """Case-insensitive equality ignores case only."""
        assert FieldEqualsIgnoreCase("name", "pRICE").is_satisfied_by(price)
        assert FieldEqualsIgnoreCase("name", "PRICE").is_satisfied_by(price)
        assert not FieldEqualsIgnoreCase("name", "Prices").is_satisfied_by(price)
        assert not FieldEqualsIgnoreCase("id", "1").is_satisfied_by(price)

    def test_dotted_path(self, product: Product) -> None:
        """Dotted paths follow relationships and collections."""
        assert FieldEquals("category.name", "Tools").is_satisfied_by(product)
        assert FieldEqualsIgnoreCase(
            "specifications.attributes.value", "9.99"
        ).is_satisfied_by(product)
        assert not FieldEquals("category.name", "Garden").is_satisfied_by(product)

    def test_dotted_path_through_missing_relationship(self) -> None:
        """A missing intermediate object never matches."""
        assert not FieldEquals("category.name", "Tools").is_satisfied_by(Product())

    def test_predicate(self, price: ProductAttributeType) -> None:
        """Predicates call the wrapped function."""
        assert Predicate(lambda t: t.name.startswith("P")).is_satisfied_by(price)
        assert not Predicate(lambda t: None).is_satisfied_by(price)


class TestComposition:
    """Tests for combining criteria."""

    def test_operators(self, price: ProductAttributeType) -> None:
        """&, | and ~ build composite criteria."""
        by_id = FieldEquals("id", 1)
        by_name = FieldEqualsIgnoreCase("name", "size")

        assert isinstance(by_id & by_name, AllOf)
        assert isinstance(by_id | by_name, AnyOf)
        assert isinstance(~by_id, Not)

        assert not (by_id & by_name).is_satisfied_by(price)
        assert (by_id | by_name).is_satisfied_by(price)
        assert (~by_name).is_satisfied_by(price)


class TestExpressions:
    """Tests for SQL translation."""

    def test_leaf_expressions(self) -> None:
        """Column criteria translate to SQL."""
        assert FieldEquals("id", 1).to_expression(ProductAttributeType) is not None
        assert MatchAll().to_expression(ProductAttributeType) is not None

        expression = FieldEqualsIgnoreCase("name", "Price").to_expression(ProductAttributeType)
        assert str(expression).count("lower(") == 2
        assert str(expression.compile(dialect=sqlite.dialect())).count("casefold(") == 2

    def test_relationship_path_expression(self) -> None:
        """Many-to-one paths become EXISTS subqueries."""
        expression = FieldEquals("category.name", "Tools").to_expression(Product)
        assert "exists" in str(expression).lower()

    def test_untranslatable(self) -> None:
        """Predicates and unknown paths stay in Python."""
        assert Predicate(lambda p: True).to_expression(Product) is None
        assert FieldEquals("active_specification", None).to_expression(Product) is None
        assert FieldEquals("missing", 1).to_expression(Product) is None

    def test_composite_with_untranslatable_part(self) -> None:
        """One Python-only part makes the whole composite Python-only."""
        translatable = FieldEquals("id", 1)
        python_only = Predicate(lambda p: True)

        assert (translatable & translatable).to_expression(Product) is not None
        assert (translatable | python_only).to_expression(Product) is None
        assert (~python_only).to_expression(Product) is None


class TestSearchers:
    """Tests for searcher wrappers."""

    def test_callable_wrapped_in_predicate(self) -> None:
        """Plain callables become predicates."""
        searcher = Searcher(Product, lambda p: True)
        assert isinstance(searcher.criterion, Predicate)

    def test_default_matches_all(self) -> None:
        """Searchers match everything by default."""
        assert CollectionSearcher(Product).criterion == MatchAll()

    def test_matches_checks_type(self, price: ProductAttributeType, product: Product) -> None:
        """Only instances of the entity type match."""
        searcher = CollectionSearcher(ProductAttributeType)
        assert searcher.matches(price)
        assert not searcher.matches(product)


class TestCatalogQueries:
    """Tests for catalog-specific criteria."""

    def test_in_category(self, product: Product) -> None:
        """Products match their own category by identity."""
        assert InCategory(ProductCategory(id=10, name="Other name")).is_satisfied_by(product)
        assert not InCategory(ProductCategory(id=11, name="Tools")).is_satisfied_by(product)
        assert InCategory(product.category).to_expression(Product) is not None

    def test_child_category_of(self) -> None:
        """Only direct children match."""
        root = ProductCategory(id=1, name="Hardware")
        child = ProductCategory(id=2, name="Tools", parent_category=root)
        grandchild = ProductCategory(id=3, name="Drills", parent_category=child)

        assert ChildCategoryOf(root).is_satisfied_by(child)
        assert not ChildCategoryOf(root).is_satisfied_by(grandchild)
        assert not ChildCategoryOf(root).is_satisfied_by(root)

    def test_attribute_of_type_in_category(
        self,
        price: ProductAttributeType,
        product: Product,
    ) -> None:
        """Attributes match by type and owning product category."""
        attribute = product.active_specification.attributes[0]

        assert AttributeOfTypeInCategory(price, product.category).is_satisfied_by(attribute)
        assert not AttributeOfTypeInCategory(
            price, ProductCategory(id=11, name="Garden")
        ).is_satisfied_by(attribute)
        assert not AttributeOfTypeInCategory(price, product.category).is_satisfied_by(
            ProductAttribute(attribute_type=price, value="9.99")
        )

    def test_has_active_attribute(self, price: ProductAttributeType, product: Product) -> None:
        """Products match when the active specification carries the value."""
        wanted = ProductAttribute(attribute_type=price, value="9.99")

        assert HasActiveAttribute(wanted).is_satisfied_by(product)
        assert not HasActiveAttribute(wanted).is_satisfied_by(Product())
        assert HasActiveAttribute(wanted).to_expression(Product) is None
