import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from unittest.mock import MagicMock

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lazyquery.container.model import LazyQueryContainer  # noqa: E402
from lazyquery.query.definition import QueryDefinition  # noqa: E402
from lazyquery.query.item import QueryItem  # noqa: E402


class MemoryQuery:
    """Query over the rows held by a :class:`MemoryQueryFactory`."""

    def __init__(
        self,
        factory: "MemoryQueryFactory",
        sort_property_ids: Sequence[Any],
        ascending: Sequence[bool],
    ) -> None:
        self._factory = factory
        rows = list(factory.rows)
        for property_id, asc in reversed(list(zip(sort_property_ids, ascending))):
            rows.sort(key=lambda row: row[property_id], reverse=not asc)
        self._rows = rows
        self._row_for: Dict[int, Dict[str, Any]] = {}

    def size(self) -> int:
        return len(self._rows)

    def load_items(self, start: int, count: int) -> List[QueryItem]:
        self._factory.load_calls.append((start, count))
        items = []
        for row in self._rows[start : start + count]:
            item = self._factory.definition.create_item(row)
            self._row_for[id(item)] = row
            items.append(item)
        return items

    def save_items(self, added, modified, removed) -> None:
        self._factory.save_calls.append((list(added), list(modified), list(removed)))
        if self._factory.fail_with is not None:
            raise self._factory.fail_with
        for item in removed:
            row = self._row_for[id(item)]
            self._factory.rows = [r for r in self._factory.rows if r is not row]
        for item in modified:
            self._row_for[id(item)].update(item.values())
        for item in added:
            self._factory.rows.append(item.values())

    def delete_all_items(self) -> bool:
        self._factory.rows.clear()
        return True

    def construct_item(self) -> QueryItem:
        return self._factory.definition.create_item()


class MemoryQueryFactory:
    def __init__(self, rows: Sequence[Dict[str, Any]] = ()) -> None:
        self.rows: List[Dict[str, Any]] = [dict(row) for row in rows]
        self.definition: Optional[QueryDefinition] = None
        self.load_calls: List[tuple] = []
        self.save_calls: List[tuple] = []
        self.queries_built = 0
        self.fail_with: Optional[Exception] = None

    def set_query_definition(self, definition: QueryDefinition) -> None:
        self.definition = definition

    def construct_query(self, sort_property_ids, ascending) -> MemoryQuery:
        self.queries_built += 1
        return MemoryQuery(self, sort_property_ids, ascending)


PEOPLE = [
    {"name": "carol", "age": 35},
    {"name": "alice", "age": 30},
    {"name": "bob", "age": 25},
]


@pytest.fixture
def people_definition() -> QueryDefinition:
    definition = QueryDefinition(batch_size=2)
    definition.add_property("name", str, None, read_only=False, sortable=True)
    definition.add_property("age", int, 0, read_only=False, sortable=True)
    return definition


@pytest.fixture
def people_factory() -> MemoryQueryFactory:
    return MemoryQueryFactory(PEOPLE)


@pytest.fixture
def people_container(people_definition, people_factory) -> LazyQueryContainer:
    return LazyQueryContainer.from_definition(people_definition, people_factory)


@pytest.fixture
def mock_view() -> MagicMock:
    view = MagicMock()
    view.size.return_value = 3
    view.is_modified.return_value = False
    view.definition = QueryDefinition()
    return view


@pytest.fixture
def mock_container(mock_view) -> LazyQueryContainer:
    return LazyQueryContainer(mock_view)


@pytest.fixture
def item_events(mock_container) -> list:
    events: list = []
    mock_container.add_item_set_change_listener(events.append)
    return events


@pytest.fixture
def make_people_container(people_definition):
    """Return a builder for a container over the given in-memory rows."""

    def _make(rows=()):
        factory = MemoryQueryFactory(rows)
        return LazyQueryContainer.from_definition(people_definition, factory), factory

    return _make
