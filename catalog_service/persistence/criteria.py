"""Storage-agnostic query criteria.

A criterion answers two questions: does an in-memory instance satisfy
it, and (optionally) what SQLAlchemy boolean expression selects the
same rows. Stores push translatable criteria down to SQL and evaluate
the rest in Python, so call sites never depend on the backend.

Example usage:
    criterion = FieldEqualsIgnoreCase("name", "price") & ~FieldEquals("id", 3)
    searcher = Searcher(ProductAttributeType, criterion)
    attribute_type = persistence.find(searcher)

Dotted paths follow relationships: ``FieldEquals("category.name", "Tools")``
becomes ``Product.category.has(ProductCategory.name == "Tools")`` in SQL.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, and_, inspect, literal, not_, or_, true
from sqlalchemy.orm import QueryableAttribute

from catalog_service.persistence.functions import casefold

T = TypeVar("T")

Expression = ColumnElement[bool]


class Criterion(ABC):
    """Base class for query criteria.

    Criteria compose with ``&``, ``|`` and ``~``.
    """

    @abstractmethod
    def is_satisfied_by(self, candidate: Any) -> bool:
        """Evaluate the criterion against an instance.

        Args:
            candidate: Entity to test.

        Returns:
            True if the entity matches.
        """

    def to_expression(self, entity_type: type) -> Expression | None:
        """Translate the criterion into a SQL expression.

        Args:
            entity_type: Mapped class being queried.

        Returns:
            Boolean SQL expression, or None if the criterion can only be
            evaluated in Python.
        """
        return None

    def __and__(self, other: "Criterion") -> "Criterion":
        return AllOf((self, other))

    def __or__(self, other: "Criterion") -> "Criterion":
        return AnyOf((self, other))

    def __invert__(self) -> "Criterion":
        return Not(self)


# ============================================================================
# Leaf Criteria
# ============================================================================


class MatchAll(Criterion):
    """Matches every entity."""

    def is_satisfied_by(self, candidate: Any) -> bool:
        return True

    def to_expression(self, entity_type: type) -> Expression | None:
        return true()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MatchAll)

    def __hash__(self) -> int:
        return hash(MatchAll)

    def __repr__(self) -> str:
        return "MatchAll()"


@dataclass(frozen=True)
class FieldEquals(Criterion):
    """Matches entities whose field at ``path`` equals ``value``.

    Attributes:
        path: Attribute name, dotted to follow relationships.
        value: Expected value.
    """

    path: str
    value: Any

    def is_satisfied_by(self, candidate: Any) -> bool:
        return _matches_path(candidate, self.path.split("."), self._compare)

    def to_expression(self, entity_type: type) -> Expression | None:
        return _build_path(entity_type, self.path.split("."), self._compare_column)

    def _compare(self, value: Any) -> bool:
        return value == self.value

    def _compare_column(self, column: QueryableAttribute) -> Expression:
        return column == self.value


@dataclass(frozen=True)
class FieldEqualsIgnoreCase(FieldEquals):
    """Case-insensitive string equality on the field at ``path``.

    Both sides are case-folded, in Python and in SQL alike.
    """

    value: str

    def _compare(self, value: Any) -> bool:
        return isinstance(value, str) and value.casefold() == self.value.casefold()

    def _compare_column(self, column: QueryableAttribute) -> Expression:
        return casefold(column) == casefold(literal(self.value))


@dataclass(frozen=True)
class Predicate(Criterion):
    """Wraps an arbitrary Python callable.

    Never translated to SQL: stores evaluate it after loading candidates.

    Attributes:
        function: Callable returning a truthy value for matches.
    """

    function: Callable[[Any], Any]

    def is_satisfied_by(self, candidate: Any) -> bool:
        return bool(self.function(candidate))


# ============================================================================
# Composite Criteria
# ============================================================================


@dataclass(frozen=True)
class AllOf(Criterion):
    """Conjunction of criteria."""

    criteria: tuple[Criterion, ...]

    def is_satisfied_by(self, candidate: Any) -> bool:
        return all(c.is_satisfied_by(candidate) for c in self.criteria)

    def to_expression(self, entity_type: type) -> Expression | None:
        expressions = [c.to_expression(entity_type) for c in self.criteria]
        if any(e is None for e in expressions):
            return None
        return and_(true(), *expressions)


@dataclass(frozen=True)
class AnyOf(Criterion):
    """Disjunction of criteria."""

    criteria: tuple[Criterion, ...]

    def is_satisfied_by(self, candidate: Any) -> bool:
        return any(c.is_satisfied_by(candidate) for c in self.criteria)

    def to_expression(self, entity_type: type) -> Expression | None:
        expressions = [c.to_expression(entity_type) for c in self.criteria]
        if not expressions or any(e is None for e in expressions):
            return None
        return or_(*expressions)


@dataclass(frozen=True)
class Not(Criterion):
    """Negation of a criterion."""

    criterion: Criterion

    def is_satisfied_by(self, candidate: Any) -> bool:
        return not self.criterion.is_satisfied_by(candidate)

    def to_expression(self, entity_type: type) -> Expression | None:
        expression = self.criterion.to_expression(entity_type)
        return None if expression is None else not_(expression)


# ============================================================================
# Searchers
# ============================================================================


@dataclass(frozen=True)
class Searcher(Generic[T]):
    """Query for a single entity of ``entity_type``.

    Plain callables are accepted as the criterion and wrapped in a
    :class:`Predicate`.

    Attributes:
        entity_type: Mapped class to search.
        criterion: Filter to apply.
    """

    entity_type: type[T]
    criterion: Criterion = field(default_factory=MatchAll)

    def __post_init__(self) -> None:
        if not isinstance(self.criterion, Criterion):
            object.__setattr__(self, "criterion", Predicate(self.criterion))

    def matches(self, candidate: Any) -> bool:
        """Check type and criterion against an instance."""
        return isinstance(candidate, self.entity_type) and self.criterion.is_satisfied_by(
            candidate
        )


@dataclass(frozen=True)
class CollectionSearcher(Searcher[T]):
    """Query for every entity of ``entity_type`` matching the criterion."""


# ============================================================================
# Path Helpers
# ============================================================================


def _matches_path(obj: Any, parts: list[str], compare: Callable[[Any], bool]) -> bool:
    head, *rest = parts
    value = getattr(obj, head, None)
    if not rest:
        return compare(value)
    if value is None:
        return False
    if isinstance(value, (list, tuple)):
        return any(_matches_path(item, rest, compare) for item in value)
    return _matches_path(value, rest, compare)


def _build_path(
    entity_type: type,
    parts: list[str],
    compare: Callable[[QueryableAttribute], Expression],
) -> Expression | None:
    head, *rest = parts
    attribute = getattr(entity_type, head, None)
    if not isinstance(attribute, QueryableAttribute):
        return None
    if not rest:
        return compare(attribute)

    relationships = inspect(entity_type).relationships
    if head not in relationships:
        return None
    relationship = relationships[head]
    inner = _build_path(relationship.mapper.class_, rest, compare)
    if inner is None:
        return None
    return attribute.any(inner) if relationship.uselist else attribute.has(inner)
