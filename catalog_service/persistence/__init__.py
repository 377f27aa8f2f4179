"""Persistence port, query criteria and store implementations."""

from catalog_service.persistence.base import PersistenceManager
from catalog_service.persistence.criteria import (
    AllOf,
    AnyOf,
    CollectionSearcher,
    Criterion,
    FieldEquals,
    FieldEqualsIgnoreCase,
    MatchAll,
    Not,
    Predicate,
    Searcher,
)
from catalog_service.persistence.functions import casefold
from catalog_service.persistence.memory import InMemoryPersistenceManager
from catalog_service.persistence.orm import SqlAlchemyPersistenceManager

__all__ = [
    # Port
    "PersistenceManager",
    # Criteria
    "AllOf",
    "AnyOf",
    "Criterion",
    "FieldEquals",
    "FieldEqualsIgnoreCase",
    "MatchAll",
    "Not",
    "Predicate",
    # SQL functions
    "casefold",
    # Searchers
    "CollectionSearcher",
    "Searcher",
    # Stores
    "InMemoryPersistenceManager",
    "SqlAlchemyPersistenceManager",
]
