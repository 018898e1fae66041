"""Query source reading and writing a single SQLite table."""

from __future__ import annotations

import logging
import sqlite3
import weakref
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...config import DEFAULT_POOL_SIZE
from ...errors import InvalidValueError, SourceError
from ...query.definition import QueryDefinition
from ...query.item import QueryItem
from .connection_pool import ConnectionPool

logger = logging.getLogger(__name__)


def quote_identifier(name: str) -> str:
    return '"' + str(name).replace('"', '""') + '"'


class SqliteQuery:
    """One sorted snapshot of *table*, paged with ``LIMIT``/``OFFSET``.

    Property ids name columns. Properties without a matching column keep their
    default value and are never written. Rows are identified by *key_column*,
    which does not need to be part of the definition.
    """

    def __init__(
        self,
        pool: ConnectionPool,
        table: str,
        key_column: str,
        definition: QueryDefinition,
        sort_property_ids: Sequence[Any] = (),
        ascending: Sequence[bool] = (),
    ) -> None:
        self._pool = pool
        self._table = table
        self._key_column = key_column
        self._definition = definition
        self._sort = list(zip(sort_property_ids, ascending))
        self._columns: Optional[List[str]] = None
        self._size: Optional[int] = None
        self._keys: "weakref.WeakKeyDictionary[QueryItem, Any]" = weakref.WeakKeyDictionary()

    def _table_columns(self) -> List[str]:
        if self._columns is None:
            rows = self._pool.execute_query(f"PRAGMA table_info({quote_identifier(self._table)})")
            if not rows:
                raise SourceError(f"Table {self._table!r} does not exist")
            self._columns = [row["name"] for row in rows]
        return self._columns

    def _property_columns(self) -> List[str]:
        columns = set(self._table_columns())
        return [pid for pid in self._definition.property_ids() if pid in columns]

    def _order_clause(self) -> str:
        columns = set(self._table_columns())
        terms = [
            f"{quote_identifier(pid)} {'ASC' if asc else 'DESC'}"
            for pid, asc in self._sort
            if pid in columns
        ]
        terms.append(f"{quote_identifier(self._key_column)} ASC")
        return ", ".join(terms)

    def size(self) -> int:
        if self._size is None:
            rows = self._pool.execute_query(
                f"SELECT COUNT(*) AS n FROM {quote_identifier(self._table)}"
            )
            self._size = int(rows[0]["n"])
        return self._size

    def load_items(self, start: int, count: int) -> List[QueryItem]:
        columns = self._property_columns()
        selected = ", ".join(
            [f"{quote_identifier(self._key_column)} AS __key"]
            + [quote_identifier(col) for col in columns]
        )
        sql = (
            f"SELECT {selected} FROM {quote_identifier(self._table)} "
            f"ORDER BY {self._order_clause()} LIMIT ? OFFSET ?"
        )
        rows = self._pool.execute_query(sql, (count, start))

        items: List[QueryItem] = []
        for row in rows:
            item = self._definition.create_item({col: row[col] for col in columns})
            self._keys[item] = row["__key"]
            items.append(item)
        return items

    def construct_item(self) -> QueryItem:
        return self._definition.create_item()

    def save_items(
        self,
        added: Sequence[QueryItem],
        modified: Sequence[QueryItem],
        removed: Sequence[QueryItem],
    ) -> None:
        table = quote_identifier(self._table)
        key = quote_identifier(self._key_column)
        columns = self._property_columns()
        statements: List[Tuple[str, Sequence[Any]]] = []

        for item in removed:
            statements.append((f"DELETE FROM {table} WHERE {key} = ?", (self._key_for(item),)))

        writable = [col for col in columns if col != self._key_column]
        if writable:
            assignments = ", ".join(f"{quote_identifier(col)} = ?" for col in writable)
            for item in modified:
                values = [item.get(col) for col in writable]
                statements.append(
                    (f"UPDATE {table} SET {assignments} WHERE {key} = ?", (*values, self._key_for(item)))
                )

        for item in added:
            insert_values: Dict[str, Any] = {col: item.get(col) for col in columns}
            if insert_values.get(self._key_column) is None:
                insert_values.pop(self._key_column, None)
            if insert_values:
                names = ", ".join(quote_identifier(col) for col in insert_values)
                marks = ", ".join("?" for _ in insert_values)
                statements.append(
                    (f"INSERT INTO {table} ({names}) VALUES ({marks})", tuple(insert_values.values()))
                )
            else:
                statements.append((f"INSERT INTO {table} DEFAULT VALUES", ()))

        logger.debug("Saving %d statements to %s", len(statements), self._table)
        try:
            self._pool.execute_transaction(statements)
        except sqlite3.IntegrityError as exc:
            raise InvalidValueError(f"Rejected by {self._table}: {exc}") from exc
        except sqlite3.Error as exc:
            raise SourceError(f"Failed to save items to {self._table}: {exc}") from exc
        self._size = None

    def delete_all_items(self) -> bool:
        try:
            self._pool.execute_transaction([(f"DELETE FROM {quote_identifier(self._table)}", ())])
        except sqlite3.Error as exc:
            raise SourceError(f"Failed to delete items from {self._table}: {exc}") from exc
        self._size = None
        return True

    def _key_for(self, item: QueryItem) -> Any:
        try:
            return self._keys[item]
        except KeyError:
            raise SourceError("Item was not loaded from this query") from None


class SqliteQueryFactory:
    """Build :class:`SqliteQuery` objects over *table* in the database at *db_path*."""

    def __init__(
        self,
        db_path: str | Path,
        table: str,
        key_column: str = "id",
        *,
        pool_size: int = DEFAULT_POOL_SIZE,
    ) -> None:
        self._pool = ConnectionPool.get_pool(db_path, pool_size)
        self._table = table
        self._key_column = key_column
        self._definition: Optional[QueryDefinition] = None

    @property
    def pool(self) -> ConnectionPool:
        return self._pool

    def set_query_definition(self, definition: QueryDefinition) -> None:
        self._definition = definition

    def construct_query(
        self, sort_property_ids: Sequence[Any], ascending: Sequence[bool]
    ) -> SqliteQuery:
        if self._definition is None:
            raise SourceError("set_query_definition() must be called before constructing queries")
        return SqliteQuery(
            self._pool,
            self._table,
            self._key_column,
            self._definition,
            sort_property_ids,
            ascending,
        )
