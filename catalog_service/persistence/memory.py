"""In-memory persistence.

Keeps committed entities in per-type dictionaries. Entities reachable
through mapped relationships from a committed entity are registered too,
mirroring the ORM's save-update cascade, and receive integer identities
the way an autoincrement column would assign them.
"""

from collections import defaultdict
from collections.abc import Iterable, Iterator
from itertools import count
from typing import Any, TypeVar

import structlog
from sqlalchemy import inspect

from catalog_service.persistence.base import PersistenceManager
from catalog_service.persistence.criteria import CollectionSearcher

logger = structlog.get_logger()

T = TypeVar("T")


class InMemoryPersistenceManager(PersistenceManager):
    """Dictionary-backed store for mapped entities.

    Example usage:
        persistence = InMemoryPersistenceManager()
        manager = ProductManager(persistence)
        manager.create_attribute_type("Price", "Product Price", r"^\\d+\\.\\d{2}$")
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._entities: dict[type, dict[int, Any]] = defaultdict(dict)
        self._pending: list[Any] = []
        self._ids: dict[type, count] = defaultdict(lambda: count(1))

    def add(self, entity: Any) -> None:
        self._pending.append(entity)

    def find_all(self, searcher: CollectionSearcher[T]) -> Iterator[T]:
        snapshot = list(self._entities[searcher.entity_type].values())
        return (entity for entity in snapshot if searcher.matches(entity))

    def commit(self) -> None:
        """Register staged entities and everything they reference.

        Known entities are walked again so that objects appended to them
        since the last commit (e.g. a new product specification) are
        registered as well.
        """
        roots = [*self._pending, *self._known()]
        registered = self._register_graph(roots)
        self._pending.clear()
        logger.debug("In-memory commit", registered=registered)

    def rollback(self) -> None:
        """Discard staged entities."""
        self._pending.clear()

    def _known(self) -> Iterable[Any]:
        for entities in list(self._entities.values()):
            yield from list(entities.values())

    def _next_id(self, entity_type: type) -> int:
        # skip identities assigned explicitly by callers
        while True:
            candidate = next(self._ids[entity_type])
            if candidate not in self._entities[entity_type]:
                return candidate

    def _register_graph(self, roots: list[Any]) -> int:
        registered = 0
        seen: set[int] = set()
        stack = list(roots)
        while stack:
            entity = stack.pop()
            if id(entity) in seen:
                continue
            seen.add(id(entity))

            entity_type = type(entity)
            if entity.id is None:
                entity.id = self._next_id(entity_type)
            if entity.id not in self._entities[entity_type]:
                self._entities[entity_type][entity.id] = entity
                registered += 1

            for relationship in inspect(entity_type).relationships:
                related = getattr(entity, relationship.key)
                if related is None:
                    continue
                if relationship.uselist:
                    stack.extend(related)
                else:
                    stack.append(related)
        return registered
