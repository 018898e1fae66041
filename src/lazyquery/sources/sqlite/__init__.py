"""SQLite-backed query source.

- `connection_pool`: per-database connection reuse
- `query`: `SqliteQuery` paging and `SqliteQueryFactory`

Usage:
    factory = SqliteQueryFactory(db_path, "people")
    container = LazyQueryContainer.from_definition(definition, factory)
"""
from .connection_pool import ConnectionPool
from .query import SqliteQuery, SqliteQueryFactory, quote_identifier

__all__ = [
    "ConnectionPool",
    "SqliteQuery",
    "SqliteQueryFactory",
    "quote_identifier",
]
