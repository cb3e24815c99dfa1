"""Cooldown Tracker: spell and item cooldown state for an in-game overlay."""

__version__ = "1.0.0"
