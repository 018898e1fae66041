"""Exception hierarchy shared by the container, views and query sources."""

from __future__ import annotations


class LazyQueryError(Exception):
    """Base class for all lazyquery errors."""


class UnsupportedOperationError(LazyQueryError, NotImplementedError):
    """Raised for mutation shapes the container deliberately does not offer."""


class SourceError(LazyQueryError):
    """Raised when the backing store fails to load, save or delete items."""


class InvalidValueError(LazyQueryError, ValueError):
    """Raised when buffered data fails validation."""


class ReadOnlyPropertyError(LazyQueryError):
    """Raised when writing to a property declared read-only."""
