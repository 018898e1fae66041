"""Default view that loads items from a query in batches and buffers edits."""

from __future__ import annotations

import bisect
import logging
from typing import Any, Dict, List, Optional, Sequence

from ..config import DEFAULT_BATCH_SIZE, DEFAULT_MAX_CACHE_SIZE
from ..errors import SourceError
from .definition import QueryDefinition
from .item import QueryItem
from .protocols import Query, QueryFactory

logger = logging.getLogger(__name__)


class LazyQueryView:
    """Expose a :class:`Query` as an indexable, buffered dataset.

    Index space: the query rows in query order, minus rows removed since the
    last commit, followed by items added since the last commit in creation
    order. Edits stay in memory until :meth:`commit` hands them to
    ``Query.save_items``; :meth:`discard` and :meth:`refresh` drop them.
    """

    def __init__(
        self,
        definition: QueryDefinition,
        factory: QueryFactory,
        *,
        max_cache_size: int = DEFAULT_MAX_CACHE_SIZE,
    ) -> None:
        self._definition = definition
        self._factory = factory
        self._factory.set_query_definition(definition)
        self._max_cache_size = max(max_cache_size, definition.batch_size)

        self._sort_property_ids: List[Any] = []
        self._ascending: List[bool] = []

        self._query: Optional[Query] = None
        self._query_size: Optional[int] = None
        # Query index -> item, in load order so the oldest batches evict first.
        self._cache: Dict[int, QueryItem] = {}

        self._added: List[QueryItem] = []
        self._modified: Dict[int, QueryItem] = {}
        self._removed: Dict[int, QueryItem] = {}
        self._removed_indices: List[int] = []

    @classmethod
    def from_factory(
        cls, factory: QueryFactory, batch_size: int = DEFAULT_BATCH_SIZE, **kwargs: Any
    ) -> "LazyQueryView":
        """Build a view over an empty definition using *batch_size*."""
        return cls(QueryDefinition(batch_size=batch_size), factory, **kwargs)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def definition(self) -> QueryDefinition:
        return self._definition

    @property
    def sort_state(self) -> tuple[List[Any], List[bool]]:
        return list(self._sort_property_ids), list(self._ascending)

    def size(self) -> int:
        return self._get_query_size() - len(self._removed_indices) + len(self._added)

    def get_item(self, index: int) -> QueryItem:
        size = self.size()
        if not (0 <= index < size):
            raise IndexError(f"Item index {index} out of range for size {size}")

        visible_rows = self._get_query_size() - len(self._removed_indices)
        if index >= visible_rows:
            return self._added[index - visible_rows]
        return self._item_at_query_index(self._to_query_index(index))

    # ------------------------------------------------------------------
    # Buffered mutations
    # ------------------------------------------------------------------
    def add_item(self) -> int:
        item = self._get_query().construct_item()
        self._added.append(item)
        return self.size() - 1

    def remove_item(self, index: int) -> None:
        size = self.size()
        if not (0 <= index < size):
            raise IndexError(f"Item index {index} out of range for size {size}")

        visible_rows = self._get_query_size() - len(self._removed_indices)
        if index >= visible_rows:
            del self._added[index - visible_rows]
            return

        query_index = self._to_query_index(index)
        item = self._item_at_query_index(query_index)
        self._modified.pop(query_index, None)
        self._removed[query_index] = item
        bisect.insort(self._removed_indices, query_index)

    def remove_all_items(self) -> None:
        self._get_query().delete_all_items()
        logger.debug("Deleted all items from backing query")
        self._reset()

    def is_modified(self) -> bool:
        return bool(self._added or self._modified or self._removed)

    def commit(self) -> None:
        if self.is_modified():
            added = list(self._added)
            modified = list(self._modified.values())
            removed = [self._removed[idx] for idx in self._removed_indices]
            logger.debug(
                "Committing %d added, %d modified, %d removed items",
                len(added),
                len(modified),
                len(removed),
            )
            self._get_query().save_items(added, modified, removed)
        self._reset()

    def discard(self) -> None:
        logger.debug("Discarding buffered changes")
        self._reset()

    def refresh(self) -> None:
        self._reset()

    def sort(self, sort_property_ids: Sequence[Any], ascending: Sequence[bool]) -> None:
        sort_property_ids = list(sort_property_ids)
        ascending = [bool(flag) for flag in ascending]
        if len(sort_property_ids) != len(ascending):
            raise ValueError(
                f"Got {len(sort_property_ids)} sort properties but {len(ascending)} directions"
            )
        sortable = set(self._definition.sortable_property_ids())
        for property_id in sort_property_ids:
            if property_id not in sortable:
                raise ValueError(f"Property {property_id!r} is not sortable")

        self._sort_property_ids = sort_property_ids
        self._ascending = ascending
        self._reset()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _get_query(self) -> Query:
        if self._query is None:
            self._query = self._factory.construct_query(
                list(self._sort_property_ids), list(self._ascending)
            )
        return self._query

    def _get_query_size(self) -> int:
        if self._query_size is None:
            self._query_size = self._get_query().size()
        return self._query_size

    def _to_query_index(self, index: int) -> int:
        """Map a visible row index onto the query index it shows."""
        query_index = index
        for removed in self._removed_indices:
            if removed > query_index:
                break
            query_index += 1
        return query_index

    def _item_at_query_index(self, query_index: int) -> QueryItem:
        item = self._cache.get(query_index)
        if item is None:
            self._load_batch(query_index)
            item = self._cache.get(query_index)
            if item is None:
                raise SourceError(f"Query did not return an item for index {query_index}")
        return item

    def _load_batch(self, query_index: int) -> None:
        batch_size = self._definition.batch_size
        start = (query_index // batch_size) * batch_size
        count = min(batch_size, self._get_query_size() - start)
        items = self._get_query().load_items(start, count)
        logger.debug("Loaded %d items at offset %d", len(items), start)

        for offset, item in enumerate(items):
            index = start + offset
            if index in self._cache:
                continue
            item.set_change_callback(
                lambda changed, index=index: self._on_item_changed(index, changed)
            )
            self._cache[index] = item
        self._evict(keep=range(start, start + count))

    def _evict(self, keep: range) -> None:
        overflow = len(self._cache) - self._max_cache_size
        if overflow <= 0:
            return
        for index in list(self._cache):
            if overflow <= 0:
                break
            if index in keep or index in self._modified or index in self._removed:
                continue
            del self._cache[index]
            overflow -= 1

    def _on_item_changed(self, query_index: int, item: QueryItem) -> None:
        if self._cache.get(query_index) is item and query_index not in self._removed:
            self._modified[query_index] = item

    def _reset(self) -> None:
        self._query = None
        self._query_size = None
        for item in self._cache.values():
            item.set_change_callback(None)
        self._cache.clear()
        self._added.clear()
        self._modified.clear()
        self._removed.clear()
        self._removed_indices.clear()
