"""Lazily loaded, buffered query containers for Qt item views."""

from .container import (
    INDEX_NOT_FOUND,
    BufferingMode,
    ItemSetChangeEvent,
    LazyQueryContainer,
    PropertySetChangeEvent,
)
from .errors import (
    InvalidValueError,
    LazyQueryError,
    ReadOnlyPropertyError,
    SourceError,
    UnsupportedOperationError,
)
from .query import LazyQueryView, PropertyDescriptor, QueryDefinition, QueryItem

__all__ = [
    "BufferingMode",
    "INDEX_NOT_FOUND",
    "InvalidValueError",
    "ItemSetChangeEvent",
    "LazyQueryContainer",
    "LazyQueryError",
    "LazyQueryView",
    "PropertyDescriptor",
    "PropertySetChangeEvent",
    "QueryDefinition",
    "QueryItem",
    "ReadOnlyPropertyError",
    "SourceError",
    "UnsupportedOperationError",
]
