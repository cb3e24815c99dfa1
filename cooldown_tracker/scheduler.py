"""Update scheduler — rate-limits cooldown poll passes."""
from __future__ import annotations

DEFAULT_UPDATE_INTERVAL = 0.1


class UpdateScheduler:
    """Accumulates tick time and lets a poll pass through once per interval when dirty.

    The dirty flag is raised by host cooldown signals and by the bag scanner;
    an idle tracker only pays for the interval comparison.
    """

    def __init__(self, interval: float = DEFAULT_UPDATE_INTERVAL):
        self.interval = interval
        self._accumulated = 0.0
        self.dirty = False

    def mark_dirty(self) -> None:
        self.dirty = True

    def consume(self) -> bool:
        """Return the dirty flag and clear it."""
        dirty = self.dirty
        self.dirty = False
        return dirty

    def tick(self, elapsed: float) -> bool:
        """Returns True when a poll pass should run now. Clears the dirty flag."""
        self._accumulated += max(0.0, elapsed)
        if self._accumulated < self.interval:
            return False
        self._accumulated = 0.0
        return self.consume()
