"""Items handed out by views, with per-property change tracking."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from ..errors import InvalidValueError, ReadOnlyPropertyError

if TYPE_CHECKING:  # pragma: no cover - import only for type checking
    from .definition import PropertyDescriptor, QueryDefinition


class ItemProperty:
    """A single property value bound to its owning :class:`QueryItem`."""

    __slots__ = ("_item", "_property_id")

    def __init__(self, item: "QueryItem", property_id: Any) -> None:
        self._item = item
        self._property_id = property_id

    @property
    def _descriptor(self) -> "PropertyDescriptor":
        return self._item.definition.descriptor(self._property_id)

    @property
    def id(self) -> Any:
        return self._property_id

    @property
    def type(self) -> type:
        return self._descriptor.type

    @property
    def read_only(self) -> bool:
        return self._descriptor.read_only

    @property
    def value(self) -> Any:
        return self._item.get(self._property_id)

    def set_value(self, value: Any) -> None:
        self._item.set(self._property_id, value)

    def __repr__(self) -> str:
        return f"ItemProperty({self.id!r}={self.value!r})"


class QueryItem:
    """Property values of one record.

    The item reads its schema from the live :class:`QueryDefinition`, so
    properties added after the item was built show their default and removed
    properties disappear. Values written through :meth:`set` are validated
    against the property descriptor and mark the item modified.
    :meth:`load_values` populates an item from the backing store without
    marking it.
    """

    def __init__(self, definition: "QueryDefinition") -> None:
        self._definition = definition
        self._values: Dict[Any, Any] = {}
        self._modified = False
        self._on_change: Optional[Callable[["QueryItem"], None]] = None

    @property
    def definition(self) -> "QueryDefinition":
        return self._definition

    def set_change_callback(self, callback: Optional[Callable[["QueryItem"], None]]) -> None:
        self._on_change = callback

    def property_ids(self) -> List[Any]:
        return self._definition.property_ids()

    def item_property(self, property_id: Any) -> ItemProperty:
        if property_id not in self._definition:
            raise KeyError(property_id)
        return ItemProperty(self, property_id)

    def get(self, property_id: Any) -> Any:
        descriptor = self._definition.descriptor(property_id)
        return self._values.get(property_id, descriptor.default)

    def set(self, property_id: Any, value: Any) -> None:
        descriptor = self._definition.descriptor(property_id)
        if descriptor.read_only:
            raise ReadOnlyPropertyError(f"Property {property_id!r} is read-only")
        if value is not None and not isinstance(value, descriptor.type):
            raise InvalidValueError(
                f"Property {property_id!r} expects {descriptor.type.__name__}, "
                f"got {type(value).__name__}"
            )
        if self.get(property_id) == value:
            return
        self._values[property_id] = value
        self._modified = True
        if self._on_change is not None:
            self._on_change(self)

    def load_values(self, values: Dict[Any, Any]) -> None:
        for property_id, value in values.items():
            if property_id in self._definition:
                self._values[property_id] = value

    def values(self) -> Dict[Any, Any]:
        return {pid: self.get(pid) for pid in self._definition.property_ids()}

    def is_modified(self) -> bool:
        return self._modified

    def clear_modified(self) -> None:
        self._modified = False

    def __getitem__(self, property_id: Any) -> Any:
        return self.get(property_id)

    def __setitem__(self, property_id: Any, value: Any) -> None:
        self.set(property_id, value)

    def __repr__(self) -> str:
        return f"QueryItem({self.values()!r})"
