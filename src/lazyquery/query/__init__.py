"""Schema, items and the default batching view behind a container."""

from .definition import PropertyDescriptor, QueryDefinition
from .item import ItemProperty, QueryItem
from .protocols import Query, QueryFactory, QueryView
from .view import LazyQueryView

__all__ = [
    "ItemProperty",
    "LazyQueryView",
    "PropertyDescriptor",
    "Query",
    "QueryDefinition",
    "QueryFactory",
    "QueryItem",
    "QueryView",
]
