"""Container exposing a query view as an indexed, buffered item collection."""

from __future__ import annotations

import logging
from typing import Any, Iterator, List, Optional, Sequence

from PySide6.QtCore import QObject, Signal

from ..config import DEFAULT_BATCH_SIZE
from ..errors import UnsupportedOperationError
from ..query.definition import QueryDefinition
from ..query.item import ItemProperty, QueryItem
from ..query.protocols import QueryFactory, QueryView
from ..query.view import LazyQueryView
from .buffering import BufferingMode
from .events import (
    ItemSetChangeEvent,
    ItemSetChangeListener,
    ObserverRegistry,
    PropertySetChangeEvent,
    PropertySetChangeListener,
)
from .identity import ItemId, id_in_range, index_for_id, is_item_id, require_item_id

logger = logging.getLogger(__name__)


class LazyQueryContainer(QObject):
    """Present a :class:`QueryView` to item views.

    Item ids are the items' current indices, so sorting, adding or removing
    items may rebind an id to another record. Every call that changes the item
    set delivers one :class:`ItemSetChangeEvent`; every schema change delivers
    one :class:`PropertySetChangeEvent`. Events carry no diff, consumers
    re-read the container. :meth:`sort` delivers nothing.

    Events go to the registered listeners first, in registration order, and
    are then emitted through :attr:`itemSetChanged` / :attr:`propertySetChanged`.

    The container is always buffered. :attr:`buffering_mode`, :attr:`read_through`
    and :attr:`write_through` are read-only properties, so assigning them raises
    :class:`AttributeError` rather than :class:`UnsupportedOperationError`.
    """

    itemSetChanged = Signal(object)
    propertySetChanged = Signal(object)

    def __init__(self, view: QueryView, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._view = view
        self._item_set_listeners: ObserverRegistry[ItemSetChangeEvent] = ObserverRegistry()
        self._property_set_listeners: ObserverRegistry[PropertySetChangeEvent] = ObserverRegistry()

    @classmethod
    def from_factory(
        cls,
        factory: QueryFactory,
        batch_size: int = DEFAULT_BATCH_SIZE,
        parent: Optional[QObject] = None,
    ) -> "LazyQueryContainer":
        """Build a container over a :class:`LazyQueryView` loading *batch_size* items at a time."""
        return cls(LazyQueryView.from_factory(factory, batch_size), parent)

    @classmethod
    def from_definition(
        cls,
        definition: QueryDefinition,
        factory: QueryFactory,
        parent: Optional[QObject] = None,
    ) -> "LazyQueryContainer":
        """Build a container over a :class:`LazyQueryView` using *definition*."""
        return cls(LazyQueryView(definition, factory), parent)

    @property
    def view(self) -> QueryView:
        return self._view

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------
    def property_ids(self) -> List[Any]:
        return self._view.definition.property_ids()

    def sortable_property_ids(self) -> List[Any]:
        return self._view.definition.sortable_property_ids()

    def property_type(self, property_id: Any) -> type:
        return self._view.definition.property_type(property_id)

    def add_property(
        self,
        property_id: Any,
        type_: type,
        default: Any = None,
        read_only: bool = True,
        sortable: bool = False,
    ) -> bool:
        self._view.definition.add_property(property_id, type_, default, read_only, sortable)
        self._notify_property_set_changed()
        return True

    def remove_property(self, property_id: Any) -> bool:
        self._view.definition.remove_property(property_id)
        self._notify_property_set_changed()
        return True

    # ------------------------------------------------------------------
    # Items and ids
    # ------------------------------------------------------------------
    def size(self) -> int:
        return self._view.size()

    def item_ids(self) -> List[ItemId]:
        return list(range(self.size()))

    def get_item(self, item_id: ItemId) -> QueryItem:
        return self._view.get_item(require_item_id(item_id))

    def get_container_property(self, item_id: ItemId, property_id: Any) -> ItemProperty:
        return self.get_item(item_id).item_property(property_id)

    def id_for_index(self, index: int) -> ItemId:
        return index

    def index_for_id(self, item_id: Any) -> int:
        return index_for_id(item_id)

    def contains_id(self, item_id: Any) -> bool:
        return id_in_range(item_id, self.size())

    def is_first_id(self, item_id: Any) -> bool:
        return is_item_id(item_id) and item_id == 0 and self.size() > 0

    def is_last_id(self, item_id: Any) -> bool:
        size = self.size()
        return is_item_id(item_id) and size > 0 and item_id == size - 1

    def first_id(self) -> ItemId:
        return 0

    def last_id(self) -> ItemId:
        """Return the last id, ``-1`` when the container is empty."""
        return self.size() - 1

    def next_id(self, item_id: ItemId) -> ItemId:
        """Return ``item_id + 1`` without range checks; validate with :meth:`contains_id`."""
        return require_item_id(item_id) + 1

    def prev_id(self, item_id: ItemId) -> ItemId:
        """Return ``item_id - 1`` without range checks; validate with :meth:`contains_id`."""
        return require_item_id(item_id) - 1

    def __len__(self) -> int:
        return self.size()

    def __bool__(self) -> bool:
        return True

    def __iter__(self) -> Iterator[ItemId]:
        return iter(range(self.size()))

    def __contains__(self, item_id: object) -> bool:
        return self.contains_id(item_id)

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------
    def sort(self, property_ids: Sequence[Any], ascending: Sequence[bool]) -> None:
        """Reorder the view. Ids now point at different records; no event is delivered."""
        self._view.sort(property_ids, ascending)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_item(self) -> ItemId:
        """Append a new item to the buffer and return its id."""
        item_id = self._view.add_item()
        self._notify_item_set_changed()
        return item_id

    def add_item_with_id(self, item_id: Any) -> QueryItem:
        raise UnsupportedOperationError("Item ids are assigned by the container")

    def add_item_at(self, index: int, item_id: Any = None) -> Any:
        raise UnsupportedOperationError("Items can only be appended")

    def add_item_after(self, previous_item_id: Any, item_id: Any = None) -> Any:
        raise UnsupportedOperationError("Items can only be appended")

    def remove_item(self, item_id: ItemId) -> bool:
        self._view.remove_item(require_item_id(item_id))
        self._notify_item_set_changed()
        return True

    def remove_all_items(self) -> bool:
        self._view.remove_all_items()
        self.refresh()
        return True

    def refresh(self) -> None:
        """Reload the view and tell listeners to re-read every item."""
        self._view.refresh()
        self._notify_item_set_changed()

    # ------------------------------------------------------------------
    # Buffering
    # ------------------------------------------------------------------
    @property
    def buffering_mode(self) -> BufferingMode:
        return BufferingMode.BUFFERED

    @property
    def read_through(self) -> bool:
        return self.buffering_mode.read_through

    @property
    def write_through(self) -> bool:
        return self.buffering_mode.write_through

    def is_modified(self) -> bool:
        return self._view.is_modified()

    def commit(self) -> None:
        """Write buffered changes to the store, then refresh.

        Raises whatever the view raises (``SourceError``, ``InvalidValueError``);
        in that case the view keeps its buffered state and nothing is refreshed.
        """
        try:
            self._view.commit()
        except Exception:
            logger.error("Commit failed, keeping buffered changes", exc_info=True)
            raise
        logger.debug("Commit succeeded, refreshing container")
        self.refresh()

    def discard(self) -> None:
        self._view.discard()
        logger.debug("Discarded buffered changes, refreshing container")
        self.refresh()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_item_set_change_listener(self, listener: ItemSetChangeListener) -> None:
        self._item_set_listeners.add(listener)

    def remove_item_set_change_listener(self, listener: ItemSetChangeListener) -> None:
        self._item_set_listeners.remove(listener)

    def add_property_set_change_listener(self, listener: PropertySetChangeListener) -> None:
        self._property_set_listeners.add(listener)

    def remove_property_set_change_listener(self, listener: PropertySetChangeListener) -> None:
        self._property_set_listeners.remove(listener)

    def _notify_item_set_changed(self) -> None:
        event = ItemSetChangeEvent(self)
        self._item_set_listeners.notify(event)
        self.itemSetChanged.emit(event)

    def _notify_property_set_changed(self) -> None:
        event = PropertySetChangeEvent(self)
        self._property_set_listeners.notify(event)
        self.propertySetChanged.emit(event)
