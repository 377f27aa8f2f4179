"""SQL functions shared by the criteria.

``casefold`` folds case the way :meth:`str.casefold` does, so SQL and
in-memory comparisons agree on non-ASCII text. SQLite's built-in
``lower()`` only folds ASCII, so the function is registered on every
SQLite connection; other dialects compile it to ``lower()``.
"""

import sqlite3
from typing import Any

from sqlalchemy import Engine, String, event
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement


class casefold(FunctionElement):
    """Case-folded string value."""

    type = String()
    name = "casefold"
    inherit_cache = True


@compiles(casefold)
def _compile_casefold(element: casefold, compiler: Any, **kw: Any) -> str:
    return f"lower({compiler.process(element.clauses, **kw)})"


@compiles(casefold, "sqlite")
def _compile_casefold_sqlite(element: casefold, compiler: Any, **kw: Any) -> str:
    return f"casefold({compiler.process(element.clauses, **kw)})"


def _fold(value: str | None) -> str | None:
    return None if value is None else value.casefold()


@event.listens_for(Engine, "connect")
def register_sqlite_functions(dbapi_connection: Any, connection_record: Any) -> None:
    """Install ``casefold`` on new SQLite connections."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        dbapi_connection.create_function("casefold", 1, _fold, deterministic=True)
