"""Property schema shared by a view, its queries and the items they build."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..config import DEFAULT_BATCH_SIZE
from .item import QueryItem


@dataclass(frozen=True)
class PropertyDescriptor:
    """Metadata for a single item property."""

    id: Any
    type: type
    default: Any = None
    read_only: bool = True
    sortable: bool = False


class QueryDefinition:
    """Ordered set of :class:`PropertyDescriptor` entries plus load settings.

    Property ids are unique. Adding an id that already exists replaces its
    descriptor without moving it.
    """

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._batch_size = batch_size
        self._descriptors: Dict[Any, PropertyDescriptor] = {}

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def property_ids(self) -> List[Any]:
        return list(self._descriptors)

    def sortable_property_ids(self) -> List[Any]:
        return [pid for pid, desc in self._descriptors.items() if desc.sortable]

    def descriptor(self, property_id: Any) -> PropertyDescriptor:
        return self._descriptors[property_id]

    def descriptors(self) -> List[PropertyDescriptor]:
        return list(self._descriptors.values())

    def property_type(self, property_id: Any) -> type:
        return self._descriptors[property_id].type

    def property_default(self, property_id: Any) -> Any:
        return self._descriptors[property_id].default

    def is_property_read_only(self, property_id: Any) -> bool:
        return self._descriptors[property_id].read_only

    def is_property_sortable(self, property_id: Any) -> bool:
        return self._descriptors[property_id].sortable

    def add_property(
        self,
        property_id: Any,
        type_: type,
        default: Any = None,
        read_only: bool = True,
        sortable: bool = False,
    ) -> PropertyDescriptor:
        descriptor = PropertyDescriptor(property_id, type_, default, read_only, sortable)
        self._descriptors[property_id] = descriptor
        return descriptor

    def remove_property(self, property_id: Any) -> Optional[PropertyDescriptor]:
        """Drop *property_id*; unknown ids are ignored."""
        return self._descriptors.pop(property_id, None)

    def create_item(self, values: Optional[Dict[Any, Any]] = None) -> QueryItem:
        """Build an item holding the defaults, overlaid with *values*."""
        item = QueryItem(self)
        if values:
            item.load_values(values)
        return item

    def __contains__(self, property_id: object) -> bool:
        return property_id in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)
