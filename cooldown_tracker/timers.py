"""Countdown text for cooldown icons.

Formats remaining seconds into short, colour-coded strings and keeps the
per-icon countdown state. Colour codes use the host's inline ``|cAARRGGBB``
escape.

The host's uptime clock is a 32-bit millisecond counter, so a cooldown that
started before the counter wrapped reports a ``start`` larger than the current
uptime. remaining_time() rebuilds the end time from the wall clock in that case.
"""
from __future__ import annotations

import math
from typing import Optional

URGENT_COLOR = "|cffff5555"  # red
WARNING_COLOR = "|cffffff55"  # yellow
NEUTRAL_COLOR = "|cffffffff"  # white

URGENT_BELOW = 5.0
WARNING_BELOW = 10.0

# Uptime clock period in seconds.
WRAP_SECONDS = (2 ** 32) / 1000

# Cooldowns shorter than this (e.g. the global cooldown) get no text.
COOLDOWN_TEXT_MIN_DURATION = 2.0
TEXT_REFRESH_INTERVAL = 0.1


def color_for(seconds: float) -> str:
    if seconds < URGENT_BELOW:
        return URGENT_COLOR
    if seconds < WARNING_BELOW:
        return WARNING_COLOR
    return NEUTRAL_COLOR


def format_cooldown_time(seconds: float) -> str:
    """Formats cooldown time in seconds into a colour-coded string.

    Always rounds up so a running cooldown never reads "0".
    """
    if seconds <= 0:
        return ""
    color = color_for(seconds)
    if seconds < 60:
        return f"{color}{math.ceil(seconds)}"
    if seconds < 3600:
        return f"{color}{math.ceil(seconds / 60)}m"
    return f"{color}{math.ceil(seconds / 3600)}h"


def remaining_time(start: float, duration: float, uptime: float, wall_clock: float) -> float:
    """Seconds left on a cooldown, correcting for an uptime counter rollover."""
    if start <= uptime:
        return duration - (uptime - start)
    # start was taken before the counter wrapped
    boot_wall_time = wall_clock - uptime
    wrapped_start = WRAP_SECONDS - start
    start_wall_time = boot_wall_time - wrapped_start
    end_wall_time = start_wall_time + duration
    return end_wall_time - wall_clock


class CountdownText:
    """Countdown text state for one icon."""

    def __init__(self, refresh_interval: float = TEXT_REFRESH_INTERVAL):
        self.start = 0.0
        self.duration = 0.0
        self.shown = False
        self.text = ""
        self._refresh_interval = refresh_interval
        self._last_refresh: Optional[float] = None

    def set_timer(self, start: float, duration: float, enabled: Optional[int] = None) -> None:
        """Show or hide the text for a new (start, duration, enabled) reading."""
        self._last_refresh = None
        if not duration or duration < COOLDOWN_TEXT_MIN_DURATION:
            self.hide()
            return
        if start > 0 and duration > 0 and (enabled is None or enabled > 0):
            self.start = start
            self.duration = duration
            self.shown = True
        else:
            self.hide()

    def hide(self) -> None:
        self.shown = False
        self.text = ""

    def refresh(self, uptime: float, wall_clock: float) -> bool:
        """Recompute the text at most once per refresh interval. Returns True if it changed."""
        if not self.shown:
            return False
        if (
            self._last_refresh is not None
            and self._last_refresh <= uptime < self._last_refresh + self._refresh_interval
        ):
            return False
        self._last_refresh = uptime
        remaining = remaining_time(self.start, self.duration, uptime, wall_clock)
        previous = self.text
        if remaining > 0:
            self.text = format_cooldown_time(remaining)
        else:
            self.hide()
        return self.text != previous
