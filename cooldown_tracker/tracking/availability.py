"""Availability reconciler — which tracked items are currently in the bags.

Per item name the state moves Unknown -> Present <-> Missing. A full scan walks
every bag slot and is throttled; while in combat the reconciler only
re-checks the locations it already knows and defers the full scan until
combat ends.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Optional

from cooldown_tracker.host import HostApi
from cooldown_tracker.models import (
    MISSING_ALPHA,
    AvailabilityStatus,
    ItemCapability,
    StorageLocation,
    TrackedEntry,
)
from cooldown_tracker.tracking.poller import CooldownPoller
from cooldown_tracker.tracking.resolver import CapabilityResolver

logger = logging.getLogger(__name__)

# Receives (name, missing, alpha) on every availability transition.
AvailabilitySink = Callable[[str, bool, float], None]

DEFAULT_SCAN_THROTTLE = 0.5


def _item_entries(entries: Iterable[TrackedEntry]) -> list[TrackedEntry]:
    return [e for e in entries if isinstance(e.capability, ItemCapability)]


def _same_name(found: Optional[str], name: str) -> bool:
    return found is not None and found.lower() == name.lower()


class AvailabilityReconciler:
    """Tracks bag locations of tracked items and their present/missing state."""

    def __init__(
        self,
        host: HostApi,
        resolver: CapabilityResolver,
        poller: CooldownPoller,
        sink: AvailabilitySink,
        throttle: float = DEFAULT_SCAN_THROTTLE,
    ):
        self._host = host
        self._resolver = resolver
        self._poller = poller
        self._sink = sink
        self.throttle = throttle
        self._last_scan_at: float | None = None
        # Set by every inventory signal, cleared by the next full scan.
        self.pending = False
        # A full scan was skipped because of combat.
        self.deferred = False
        self.scan_count = 0
        self.verify_count = 0

    def scan_allowed(self, now: float) -> bool:
        if self._last_scan_at is None:
            return True
        if now < self._last_scan_at:
            # Uptime clock wrapped since the last scan.
            return True
        return now - self._last_scan_at > self.throttle

    def scan_all(self, entries: Iterable[TrackedEntry], now: float) -> None:
        """Walk every bag slot and rebuild the location list of each tracked item."""
        items = _item_entries(entries)
        self.scan_count += 1
        self._last_scan_at = now
        self.pending = False
        self.deferred = False

        # Bag names match tracked names case-insensitively.
        candidates: dict[str, list[StorageLocation]] = {e.name.lower(): [] for e in items}
        for container, slot, name in self._bag_slots():
            if name.lower() in candidates:
                candidates[name.lower()].append(StorageLocation(container, slot))

        for entry in items:
            locations = candidates[entry.name.lower()]
            entry.capability.locations = locations
            if locations:
                self._mark_present(entry, now)
            else:
                self._mark_missing(entry)
        logger.debug(
            "Bag scan #%d: %d/%d tracked items present",
            self.scan_count,
            sum(1 for e in items if not e.is_missing),
            len(items),
        )

    def find_in_bags(self, name: str) -> Optional[str]:
        """Bag display name of the first item matching ``name``, ignoring case."""
        for _, _, found in self._bag_slots():
            if _same_name(found, name):
                return found
        return None

    def _bag_slots(self) -> Iterator[tuple[int, int, str]]:
        for container in self._host.containers() or []:
            for slot in range(1, (self._host.container_size(container) or 0) + 1):
                name = self._resolver.item_name_at(container, slot)
                if name is not None:
                    yield container, slot, name

    def verify_known(self, entries: Iterable[TrackedEntry]) -> None:
        """Drop known locations that no longer hold the item; never discovers new ones."""
        self.verify_count += 1
        for entry in _item_entries(entries):
            if entry.availability != AvailabilityStatus.PRESENT:
                continue
            known = entry.capability.locations
            kept = [
                loc
                for loc in known
                if _same_name(self._resolver.item_name_at(loc.container, loc.slot), entry.name)
            ]
            if len(kept) != len(known):
                logger.debug(
                    "%s: %d of %d known locations still valid", entry.name, len(kept), len(known)
                )
                entry.capability.locations = kept
            if not kept:
                self._mark_missing(entry)

    def request_scan(self, entries: Iterable[TrackedEntry], now: float, in_combat: bool) -> bool:
        """Handle an inventory-changed signal. Returns True if a full scan ran."""
        self.pending = True
        if in_combat:
            self.deferred = True
            self.verify_known(entries)
            return False
        if self.scan_allowed(now):
            self.scan_all(entries, now)
            return True
        return False

    def drain_pending(self, entries: Iterable[TrackedEntry], now: float, in_combat: bool) -> bool:
        """Run a scan that an earlier, throttled signal asked for."""
        if not self.pending or in_combat or not self.scan_allowed(now):
            return False
        self.scan_all(entries, now)
        return True

    def combat_ended(self, entries: Iterable[TrackedEntry], now: float) -> bool:
        """One full scan if any inventory signal was deferred during combat."""
        if not self.deferred:
            return False
        self.scan_all(entries, now)
        return True

    def _mark_present(self, entry: TrackedEntry, now: float) -> None:
        previous = entry.availability
        if previous == AvailabilityStatus.PRESENT:
            return
        entry.availability = AvailabilityStatus.PRESENT
        entry.alpha = entry.configured_alpha
        self._sink(entry.name, False, entry.alpha)
        if previous == AvailabilityStatus.MISSING:
            # Back in the bags, possibly mid-cooldown.
            logger.info("%s is back in bags", entry.name)
            self._poller.update(entry, now)

    def _mark_missing(self, entry: TrackedEntry) -> None:
        if entry.availability == AvailabilityStatus.MISSING:
            return
        entry.availability = AvailabilityStatus.MISSING
        entry.alpha = MISSING_ALPHA
        # The cooldown display is left running.
        logger.info("%s is missing from bags", entry.name)
        self._sink(entry.name, True, entry.alpha)
