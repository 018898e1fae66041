"""Buffering modes a container can run in."""

from __future__ import annotations

from enum import Enum


class BufferingMode(Enum):
    """How edits reach the backing store.

    ``BUFFERED`` keeps edits in the view until ``commit``; reads come from the
    view's cache rather than re-reading the store.
    """

    BUFFERED = "buffered"

    @property
    def read_through(self) -> bool:
        return False

    @property
    def write_through(self) -> bool:
        return False
