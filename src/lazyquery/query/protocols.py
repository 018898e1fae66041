"""Contracts between the container, its view and the backing store."""

from __future__ import annotations

from typing import Any, List, Protocol, Sequence, runtime_checkable

from .definition import QueryDefinition
from .item import QueryItem


@runtime_checkable
class Query(Protocol):
    """One sorted snapshot of the backing store."""

    def size(self) -> int:
        ...

    def load_items(self, start: int, count: int) -> List[QueryItem]:
        ...

    def save_items(
        self,
        added: Sequence[QueryItem],
        modified: Sequence[QueryItem],
        removed: Sequence[QueryItem],
    ) -> None:
        ...

    def delete_all_items(self) -> bool:
        ...

    def construct_item(self) -> QueryItem:
        ...


@runtime_checkable
class QueryFactory(Protocol):
    def set_query_definition(self, definition: QueryDefinition) -> None:
        ...

    def construct_query(
        self, sort_property_ids: Sequence[Any], ascending: Sequence[bool]
    ) -> Query:
        ...


@runtime_checkable
class QueryView(Protocol):
    """The dataset behind a :class:`~lazyquery.container.model.LazyQueryContainer`.

    Indices are positions in the current ordering. ``commit`` may raise
    :class:`~lazyquery.errors.SourceError` or
    :class:`~lazyquery.errors.InvalidValueError`; ``discard`` may raise
    :class:`~lazyquery.errors.SourceError`.
    """

    @property
    def definition(self) -> QueryDefinition:
        ...

    def size(self) -> int:
        ...

    def get_item(self, index: int) -> QueryItem:
        ...

    def sort(self, sort_property_ids: Sequence[Any], ascending: Sequence[bool]) -> None:
        ...

    def add_item(self) -> int:
        ...

    def remove_item(self, index: int) -> None:
        ...

    def remove_all_items(self) -> None:
        ...

    def refresh(self) -> None:
        ...

    def commit(self) -> None:
        ...

    def discard(self) -> None:
        ...

    def is_modified(self) -> bool:
        ...
