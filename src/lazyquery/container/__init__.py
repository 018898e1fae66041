"""Indexed, buffered container facade and its change notifications."""

from .buffering import BufferingMode
from .events import (
    ItemSetChangeEvent,
    ItemSetChangeListener,
    ObserverRegistry,
    PropertySetChangeEvent,
    PropertySetChangeListener,
)
from .identity import INDEX_NOT_FOUND, ItemId
from .model import LazyQueryContainer

__all__ = [
    "BufferingMode",
    "INDEX_NOT_FOUND",
    "ItemId",
    "ItemSetChangeEvent",
    "ItemSetChangeListener",
    "LazyQueryContainer",
    "ObserverRegistry",
    "PropertySetChangeEvent",
    "PropertySetChangeListener",
]
