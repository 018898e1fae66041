"""Positional item identities.

An identity is a plain ``int`` equal to the item's current index. Lookups and
boundary checks tolerate any other value and answer "not found"; calls that act
on an item require a real identity and raise :class:`TypeError` otherwise.
"""

from __future__ import annotations

from typing import Any

ItemId = int

INDEX_NOT_FOUND = -1


def is_item_id(value: Any) -> bool:
    """Return ``True`` when *value* has the identity type (``bool`` excluded)."""
    return isinstance(value, int) and not isinstance(value, bool)


def require_item_id(value: Any) -> ItemId:
    if not is_item_id(value):
        raise TypeError(f"Item ids are int, got {type(value).__name__}: {value!r}")
    return value


def index_for_id(value: Any) -> int:
    return value if is_item_id(value) else INDEX_NOT_FOUND


def id_in_range(value: Any, size: int) -> bool:
    return is_item_id(value) and 0 <= value < size
