"""Qt list model presenting a :class:`LazyQueryContainer` to item views."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from PySide6.QtCore import QAbstractListModel, QModelIndex, QObject, Qt

from ..container.events import ItemSetChangeEvent, PropertySetChangeEvent
from ..container.model import LazyQueryContainer
from ..errors import InvalidValueError, ReadOnlyPropertyError

logger = logging.getLogger(__name__)

_DISPLAY_ROLES = (int(Qt.ItemDataRole.DisplayRole), int(Qt.ItemDataRole.EditRole))
_FIRST_PROPERTY_ROLE = int(Qt.ItemDataRole.UserRole) + 1


class LazyQueryListModel(QAbstractListModel):
    """Expose container items as rows.

    ``DisplayRole``/``EditRole`` show *display_property* (the first schema
    property when unset). Every schema property is also available under its
    own role starting at ``Qt.UserRole + 1``, in schema order. A display
    property missing from the schema shows nothing and is not editable.
    """

    def __init__(
        self,
        container: LazyQueryContainer,
        display_property: Any = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._container = container
        self._display_property = display_property
        self._container.add_item_set_change_listener(self._on_item_set_changed)
        self._container.add_property_set_change_listener(self._on_property_set_changed)

    def container(self) -> LazyQueryContainer:
        return self._container

    def detach(self) -> None:
        """Stop following container notifications."""
        self._container.remove_item_set_change_listener(self._on_item_set_changed)
        self._container.remove_property_set_change_listener(self._on_property_set_changed)

    # ------------------------------------------------------------------
    # Role helpers
    # ------------------------------------------------------------------
    def display_property(self) -> Any:
        if self._display_property is not None:
            return self._display_property
        property_ids = self._container.property_ids()
        return property_ids[0] if property_ids else None

    def role_for_property(self, property_id: Any) -> int:
        return _FIRST_PROPERTY_ROLE + self._container.property_ids().index(property_id)

    def _property_for_role(self, role: int) -> Any:
        role = int(role)
        if role in _DISPLAY_ROLES:
            property_id = self.display_property()
            return property_id if property_id in self._container.view.definition else None
        property_ids: List[Any] = self._container.property_ids()
        offset = role - _FIRST_PROPERTY_ROLE
        if 0 <= offset < len(property_ids):
            return property_ids[offset]
        return None

    # ------------------------------------------------------------------
    # Qt model implementation
    # ------------------------------------------------------------------
    def rowCount(self, parent: QModelIndex | None = None) -> int:  # type: ignore[override]
        if parent is not None and parent.isValid():
            return 0
        return self._container.size()

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid() or not self._container.contains_id(index.row()):
            return None
        property_id = self._property_for_role(role)
        if property_id is None:
            return None
        return self._container.get_item(index.row()).get(property_id)

    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        names = dict(super().roleNames())
        for offset, property_id in enumerate(self._container.property_ids()):
            names[_FIRST_PROPERTY_ROLE + offset] = str(property_id).encode("utf-8")
        return names

    def flags(self, index: QModelIndex):  # type: ignore[override]
        flags = super().flags(index)
        if not index.isValid():
            return flags
        definition = self._container.view.definition
        property_id = self.display_property()
        if property_id in definition and not definition.is_property_read_only(property_id):
            flags |= Qt.ItemFlag.ItemIsEditable
        return flags

    def setData(
        self, index: QModelIndex, value: Any, role: int = Qt.EditRole
    ) -> bool:  # type: ignore[override]
        if not index.isValid() or not self._container.contains_id(index.row()):
            return False
        property_id = self._property_for_role(role)
        if property_id is None:
            return False
        try:
            self._container.get_item(index.row()).set(property_id, value)
        except (ReadOnlyPropertyError, InvalidValueError) as exc:
            logger.warning("Rejected edit of %r on row %d: %s", property_id, index.row(), exc)
            return False
        self.dataChanged.emit(index, index, [int(role)])
        return True

    def sort(self, column: int, order: Qt.SortOrder = Qt.AscendingOrder) -> None:  # type: ignore[override]
        property_id = self.display_property()
        if property_id not in self._container.view.definition:
            return
        self.sort_by([property_id], [order == Qt.SortOrder.AscendingOrder])

    def sort_by(self, property_ids: List[Any], ascending: List[bool]) -> None:
        """Sort the container and relayout, since the container does not notify on sort."""
        self.layoutAboutToBeChanged.emit()
        self._container.sort(property_ids, ascending)
        self.layoutChanged.emit()

    # ------------------------------------------------------------------
    # Container callbacks
    # ------------------------------------------------------------------
    def _on_item_set_changed(self, event: ItemSetChangeEvent) -> None:
        # The container has already changed; a reset makes views re-read every row.
        self.beginResetModel()
        self.endResetModel()

    def _on_property_set_changed(self, event: PropertySetChangeEvent) -> None:
        self.beginResetModel()
        self.endResetModel()
