"""Persistence port.

The single entry point the catalog uses for storage. Implementations
decide where entities live; callers only stage, search and commit.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from itertools import islice
from typing import Any, TypeVar

import structlog

from catalog_service.persistence.criteria import CollectionSearcher, Searcher

logger = structlog.get_logger()

T = TypeVar("T")


class PersistenceManager(ABC):
    """Abstract storage interface.

    Contract:
        - ``add`` stages an entity; nothing is visible before ``commit``.
        - ``find`` returns the single match, or None when zero or more
          than one entity matches.
        - ``find_all`` returns a lazily evaluated iterator of matches.
        - ``commit`` flushes staged work as one atomic unit.
    """

    @abstractmethod
    def add(self, entity: Any) -> None:
        """Stage a new entity for insertion.

        Args:
            entity: Mapped entity instance.
        """

    @abstractmethod
    def find_all(self, searcher: CollectionSearcher[T]) -> Iterator[T]:
        """Find every entity matching the searcher.

        Args:
            searcher: Entity type and criterion.

        Returns:
            Lazy iterator over matches.
        """

    @abstractmethod
    def commit(self) -> None:
        """Flush staged changes to storage."""

    def find(self, searcher: Searcher[T]) -> T | None:
        """Find the single entity matching the searcher.

        Ambiguous matches are reported as absent rather than resolved
        to an arbitrary entity.

        Args:
            searcher: Entity type and criterion.

        Returns:
            The unique match, or None.
        """
        collection = CollectionSearcher(searcher.entity_type, searcher.criterion)
        matches = list(islice(self.find_all(collection), 2))
        if len(matches) == 1:
            return matches[0]
        if matches:
            logger.warning(
                "Ambiguous single-entity search",
                entity_type=searcher.entity_type.__name__,
                criterion=repr(searcher.criterion),
            )
        return None
