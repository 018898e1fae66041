"""Change events and the listener registries that deliver them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Generic, List, TypeVar

if TYPE_CHECKING:  # pragma: no cover - import only for type checking
    from .model import LazyQueryContainer


@dataclass(frozen=True)
class ItemSetChangeEvent:
    """Items were added, removed or reloaded; re-read the container."""

    container: "LazyQueryContainer"


@dataclass(frozen=True)
class PropertySetChangeEvent:
    """The property schema changed; re-read the property ids."""

    container: "LazyQueryContainer"


E = TypeVar("E")

Listener = Callable[[E], None]
ItemSetChangeListener = Callable[[ItemSetChangeEvent], None]
PropertySetChangeListener = Callable[[PropertySetChangeEvent], None]


class ObserverRegistry(Generic[E]):
    """Ordered multiset of listeners for one event type.

    The same listener may be registered more than once and is then called once
    per registration. :meth:`notify` iterates over a snapshot, so listeners
    added or removed while an event is being delivered only see later events.
    An exception raised by a listener stops delivery and propagates.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener[E]] = []

    def add(self, listener: Listener[E]) -> None:
        self._listeners.append(listener)

    def remove(self, listener: Listener[E]) -> None:
        """Remove one registration of *listener*; unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self, event: E) -> None:
        for listener in list(self._listeners):
            listener(event)

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)

    def __contains__(self, listener: object) -> bool:
        return listener in self._listeners
