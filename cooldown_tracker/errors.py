"""Error types raised inside the tracker core.

A name that resolves to nothing is not an error: resolvers return ``None``.
"""
from __future__ import annotations


class TrackerError(Exception):
    """Base class for tracker errors."""


class InvalidInputError(TrackerError):
    """A user-supplied argument is empty or out of its allowed range."""


class StaleHandleError(TrackerError):
    """A cached spellbook slot no longer holds the spell it was resolved for."""

    def __init__(self, name: str, slot: int, found: str | None = None):
        self.name = name
        self.slot = slot
        self.found = found
        super().__init__(f"Slot {slot} no longer holds {name!r} (found {found!r})")
