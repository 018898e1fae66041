"""Qt models built on top of lazyquery containers."""

from .list_model import LazyQueryListModel

__all__ = ["LazyQueryListModel"]
