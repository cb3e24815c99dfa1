"""Cooldown poller — reads (start, duration, enabled) from the host and gates changes."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from cooldown_tracker.host import CooldownReading, HostApi
from cooldown_tracker.models import (
    Capability,
    CooldownObservation,
    ItemCapability,
    SpellCapability,
    TrackedEntry,
)

logger = logging.getLogger(__name__)

# Receives (name, start, duration, enabled) whenever a published cooldown changes.
ObservationSink = Callable[[str, float, float, int], None]


def _to_observation(reading: Optional[CooldownReading]) -> Optional[CooldownObservation]:
    if reading is None:
        return None
    start, duration, enabled = reading
    if start is None or duration is None:
        return None
    return CooldownObservation(float(start), float(duration), int(enabled or 0))


class CooldownPoller:
    """Polls one capability at a time; publishes only on (start, duration) changes."""

    def __init__(self, host: HostApi, sink: ObservationSink):
        self._host = host
        self._sink = sink
        self.poll_count = 0

    def poll(self, capability: Capability) -> Optional[CooldownObservation]:
        """Current host reading for the capability, or None when there is none.

        Items are read from their first known bag location.
        """
        self.poll_count += 1
        if isinstance(capability, SpellCapability):
            return _to_observation(self._host.spell_cooldown(capability.slot))
        if isinstance(capability, ItemCapability):
            location = capability.first_location
            if location is None:
                return None
            return _to_observation(
                self._host.item_cooldown(location.container, location.slot)
            )
        return None

    def publish(self, entry: TrackedEntry, observation: CooldownObservation, now: float) -> bool:
        """Store the observation on the entry and notify the sink if it changed.

        A finished cooldown goes out as an explicit clear so the sweep and
        timer text are hidden even if polling skipped the expiry tick.
        """
        if not entry.cooldown.apply(observation, now):
            return False
        if observation.is_running:
            self._sink(entry.name, observation.start, observation.duration, observation.enabled)
        else:
            cleared = CooldownObservation.cleared()
            self._sink(entry.name, cleared.start, cleared.duration, cleared.enabled)
        return True

    def update(self, entry: TrackedEntry, now: float) -> bool:
        """poll() then publish(); False when there was no reading or no change."""
        observation = self.poll(entry.capability)
        if observation is None:
            logger.debug("No cooldown reading for %s", entry.name)
            return False
        return self.publish(entry, observation, now)
