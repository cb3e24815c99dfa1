"""Cooldown tracker — wires resolver, poller, reconciler and scheduler together.

Every host signal goes through CooldownTracker.handle(). Results leave as Qt
signals so an overlay can connect its icons without the core knowing about
frames.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from cooldown_tracker.events import (
    CombatEntered,
    CombatExited,
    CooldownChanged,
    HostEvent,
    InventoryChanged,
    SpellbookChanged,
    Tick,
)
from cooldown_tracker.host import HostApi
from cooldown_tracker.models import (
    DEFAULT_ITEM_ICON,
    AvailabilityStatus,
    Capability,
    CapabilityKind,
    IconPosition,
    ItemCapability,
    SpellCacheEntry,
    SpellCapability,
    TrackedEntry,
    TrackerConfig,
)
from cooldown_tracker.scheduler import UpdateScheduler
from cooldown_tracker.timers import remaining_time
from cooldown_tracker.tracking import AvailabilityReconciler, CapabilityResolver, CooldownPoller

logger = logging.getLogger(__name__)


@dataclass
class TrackerContext:
    """All mutable tracker state, owned by one CooldownTracker."""
    config: TrackerConfig
    scheduler: UpdateScheduler
    # Tracked entries in display order: spells first, then items
    entries: dict[str, TrackedEntry] = field(default_factory=dict)
    # Configured spell names that matched nothing in the spellbook
    unresolved: list[str] = field(default_factory=list)
    in_combat: bool = False

    def spell_entries(self) -> list[TrackedEntry]:
        return [e for e in self.entries.values() if e.kind == CapabilityKind.SPELL]

    def item_entries(self) -> list[TrackedEntry]:
        return [e for e in self.entries.values() if e.kind == CapabilityKind.ITEM]


class CooldownTracker(QObject):
    """Tracks cooldowns and item availability for the configured spells and items."""

    # name, start, duration, enabled; (0, 0, 0) means the cooldown cleared
    cooldown_observed = pyqtSignal(str, float, float, int)
    # name, missing, alpha
    availability_changed = pyqtSignal(str, bool, float)
    alpha_changed = pyqtSignal(str, float)
    # icon size, cooldown sweep scale
    size_changed = pyqtSignal(float, float)
    # name, colour-coded text ("" = hide)
    timer_text_changed = pyqtSignal(str, str)
    # list[TrackedEntry] after every rebuild
    capabilities_rebuilt = pyqtSignal(list)

    def __init__(self, host: HostApi, config: TrackerConfig, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._host = host
        self.context = TrackerContext(
            config=config,
            scheduler=UpdateScheduler(config.update_interval),
        )
        self.resolver = CapabilityResolver(host)
        self.poller = CooldownPoller(host, self._on_observation)
        self.reconciler = AvailabilityReconciler(
            host,
            self.resolver,
            self.poller,
            self.availability_changed.emit,
            throttle=config.scan_throttle,
        )

    @property
    def config(self) -> TrackerConfig:
        return self.context.config

    @property
    def entries(self) -> dict[str, TrackedEntry]:
        return self.context.entries

    def now(self) -> float:
        return self._host.uptime()

    def start(self) -> None:
        """Build the icons and do the initial bag scan."""
        self.rebuild(scan=False)
        self.reconciler.scan_all(self.entries.values(), self.now())
        self.context.scheduler.mark_dirty()
        logger.info(
            "Tracking %d spell(s) and %d item(s)",
            len(self.context.spell_entries()),
            len(self.context.item_entries()),
        )
        if self.context.unresolved:
            logger.warning("Not in spellbook: %s", ", ".join(self.context.unresolved))

    # --- Event dispatch ---

    def handle(self, event: HostEvent) -> None:
        ctx = self.context
        if isinstance(event, Tick):
            self._on_tick(event.elapsed)
        elif isinstance(event, CooldownChanged):
            ctx.scheduler.mark_dirty()
            if event.kind == CapabilityKind.ITEM:
                if self.reconciler.drain_pending(ctx.entries.values(), self.now(), ctx.in_combat):
                    ctx.scheduler.mark_dirty()
        elif isinstance(event, InventoryChanged):
            if self.reconciler.request_scan(ctx.entries.values(), self.now(), ctx.in_combat):
                ctx.scheduler.mark_dirty()
        elif isinstance(event, SpellbookChanged):
            logger.debug("Spellbook changed; re-resolving spells")
            self.rebuild()
        elif isinstance(event, CombatEntered):
            ctx.in_combat = True
        elif isinstance(event, CombatExited):
            ctx.in_combat = False
            if self.reconciler.combat_ended(ctx.entries.values(), self.now()):
                ctx.scheduler.mark_dirty()
        else:
            logger.debug("Ignoring unknown event %r", event)

    def _on_tick(self, elapsed: float) -> None:
        ctx = self.context
        now = self.now()
        if self.reconciler.drain_pending(ctx.entries.values(), now, ctx.in_combat):
            ctx.scheduler.mark_dirty()
        if ctx.scheduler.tick(elapsed):
            self.update_all(now)
        if ctx.config.enable_timer_text:
            self._refresh_timer_text(now)

    def update_all(self, now: float) -> None:
        """Poll every spell, and every item that has a known bag location."""
        for entry in self.entries.values():
            if isinstance(entry.capability, ItemCapability) and entry.capability.first_location is None:
                continue
            self.poller.update(entry, now)

    def _on_observation(self, name: str, start: float, duration: float, enabled: int) -> None:
        entry = self.entries.get(name)
        if entry is None:
            return
        had_text = entry.countdown.text
        entry.countdown.set_timer(start, duration, enabled)
        self.cooldown_observed.emit(name, start, duration, enabled)
        if had_text and not entry.countdown.shown:
            self.timer_text_changed.emit(name, "")

    def _refresh_timer_text(self, now: float) -> None:
        wall_clock: Optional[float] = None
        for entry in self.entries.values():
            if not entry.countdown.shown:
                continue
            if wall_clock is None:
                wall_clock = self._host.wall_clock()
            if entry.countdown.refresh(now, wall_clock):
                self.timer_text_changed.emit(entry.name, entry.countdown.text)

    # --- Capability set ---

    def rebuild(self, scan: bool = True) -> None:
        """Re-create entries from the config. Spells are re-resolved, items keep their bag state."""
        ctx = self.context
        previous = ctx.entries
        entries: dict[str, TrackedEntry] = {}
        unresolved: list[str] = []
        carried: list[TrackedEntry] = []

        for name in ctx.config.spells:
            if name in entries:
                continue
            spell = self._resolve_spell(name)
            if spell is None:
                unresolved.append(name)
                continue
            entries[name] = self._new_entry(spell, len(entries) + 1)

        for name, icon in ctx.config.items.items():
            if name in entries:
                continue
            entry = self._new_entry(
                ItemCapability(name=name, icon=icon or DEFAULT_ITEM_ICON), len(entries) + 1
            )
            old = previous.get(name)
            if old is not None and isinstance(old.capability, ItemCapability):
                entry.capability.locations = list(old.capability.locations)
                entry.availability = old.availability
                entry.alpha = old.alpha
                if old.is_missing:
                    # No bag slot to poll, so the old cooldown is the only copy.
                    entry.cooldown = old.cooldown
                    entry.countdown = old.countdown
                    carried.append(entry)
            entries[name] = entry

        ctx.entries = entries
        ctx.unresolved = unresolved
        ctx.scheduler.mark_dirty()
        self.capabilities_rebuilt.emit(list(entries.values()))
        for entry in carried:
            cooldown = entry.cooldown
            if cooldown.start > 0 and cooldown.duration > 0:
                self.cooldown_observed.emit(
                    entry.name, cooldown.start, cooldown.duration, cooldown.enabled
                )
            if entry.countdown.text:
                self.timer_text_changed.emit(entry.name, entry.countdown.text)
        if scan and any(e.availability == AvailabilityStatus.UNKNOWN for e in ctx.item_entries()):
            if self.reconciler.request_scan(entries.values(), self.now(), ctx.in_combat):
                ctx.scheduler.mark_dirty()

    def _resolve_spell(self, name: str) -> Optional[SpellCapability]:
        cache = self.context.config.spell_cache
        cached = cache.get(name)
        if cached is not None:
            spell = self.resolver.from_cache(name, cached)
        else:
            spell = self.resolver.find_spell(name)
        if spell is None:
            cache.pop(name, None)
            logger.warning("Spell %r not found; it will not be shown", name)
            return None
        cache[name] = SpellCacheEntry(texture=spell.icon, slot=spell.slot)
        return spell

    def _new_entry(self, capability: Capability, icon_count: int) -> TrackedEntry:
        alpha = self.context.config.icon_alpha
        return TrackedEntry(
            capability=capability,
            configured_alpha=alpha,
            alpha=alpha,
            position=self.context.config.position_for(capability.name, icon_count),
        )

    # --- Settings that touch live entries ---

    def set_icon_alpha(self, alpha: float) -> None:
        self.context.config.icon_alpha = alpha
        for entry in self.entries.values():
            entry.configured_alpha = alpha
            if entry.is_missing:
                continue
            entry.alpha = alpha
            self.alpha_changed.emit(entry.name, alpha)

    def set_icon_size(self, size: float) -> None:
        config = self.context.config
        config.icon_size = size
        self.size_changed.emit(float(size), config.cooldown_scale)

    def set_timer_text_enabled(self, enabled: bool) -> None:
        self.context.config.enable_timer_text = enabled
        if enabled:
            return
        for entry in self.entries.values():
            if entry.countdown.text:
                entry.countdown.text = ""
                self.timer_text_changed.emit(entry.name, "")

    def save_icon_position(self, name: str, anchor: str, x: float, y: float) -> bool:
        """Remember where the user dropped an icon. Ignored while icons are locked."""
        entry = self.entries.get(name)
        if entry is None or self.context.config.locked:
            return False
        position = IconPosition(anchor=anchor, x=x, y=y)
        entry.position = position
        self.context.config.icon_positions[name] = position
        return True

    def status_of(self, entry: TrackedEntry, now: Optional[float] = None) -> str:
        if entry.availability == AvailabilityStatus.MISSING:
            return "missing"
        if entry.is_item and entry.availability == AvailabilityStatus.UNKNOWN:
            return "not scanned"
        cooldown = entry.cooldown
        if cooldown.start > 0 and cooldown.duration > 0:
            now = self.now() if now is None else now
            if remaining_time(cooldown.start, cooldown.duration, now, self._host.wall_clock()) > 0:
                return "cooldown"
        return "ready"
