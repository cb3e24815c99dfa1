"""Command surface for a chat/CLI front end.

Every command returns a CommandResult with a message meant for the user. A
failed command leaves config and tracker state untouched.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from cooldown_tracker.errors import InvalidInputError
from cooldown_tracker.models import (
    DEFAULT_ITEM_ICON,
    CommandResult,
    TrackerConfig,
)
from cooldown_tracker.tracker import CooldownTracker

logger = logging.getLogger(__name__)

ICON_SIZE_RANGE = (10, 100)
ICON_ALPHA_RANGE = (0.1, 1.0)


def _require_name(name: str) -> str:
    cleaned = " ".join(str(name or "").split())
    if not cleaned:
        raise InvalidInputError("Name must not be empty")
    return cleaned


def _parse_number(value: Union[str, float, int], label: str, low: float, high: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid {label}. Use a number between {low:g} and {high:g}")
    if not (low <= number <= high):
        raise InvalidInputError(f"Invalid {label}. Use a number between {low:g} and {high:g}")
    return number


class TrackerCommands:
    """list / add / remove / size / alpha / lock / timers."""

    def __init__(
        self,
        tracker: CooldownTracker,
        on_config_changed: Optional[Callable[[TrackerConfig], None]] = None,
    ):
        self._tracker = tracker
        self._on_config_changed = on_config_changed

    @property
    def _config(self) -> TrackerConfig:
        return self._tracker.config

    def _changed(self, result: CommandResult) -> CommandResult:
        if result.ok and self._on_config_changed is not None:
            self._on_config_changed(self._config)
        return result

    def list_tracked(self) -> CommandResult:
        entries = self._tracker.entries
        lines: list[str] = []
        for name in self._config.spells:
            entry = entries.get(name)
            if entry is None:
                lines.append(f"{name} (spell) - not found")
            else:
                lines.append(f"{name} (spell) - {self._tracker.status_of(entry)}")
        for name in self._config.items:
            if name in self._config.spells:
                continue
            entry = entries.get(name)
            status = self._tracker.status_of(entry) if entry is not None else "not found"
            lines.append(f"{name} (item) - {status}")
        if not lines:
            return CommandResult.success("Nothing is being tracked")
        return CommandResult.success("\n".join(lines))

    def add_spell(self, name: str) -> CommandResult:
        try:
            name = _require_name(name)
        except InvalidInputError as e:
            return CommandResult.failure(str(e))
        if self._config.is_tracked(name):
            return CommandResult.failure(f"{name} is already tracked")
        spell = self._tracker.resolver.find_spell(name)
        if spell is None:
            return CommandResult.failure(f"{name} was not found in your spellbook")
        self._config.spells.append(spell.name)
        self._tracker.rebuild(scan=False)
        logger.info("Now tracking spell %s", spell.name)
        return self._changed(CommandResult.success(f"Now tracking {spell.name}"))

    def add_item(self, name: str, icon: Optional[str] = None) -> CommandResult:
        try:
            name = _require_name(name)
        except InvalidInputError as e:
            return CommandResult.failure(str(e))
        existing = self._config.find_item(name)
        if existing is not None:
            return CommandResult.success(f"Already tracking {existing}")
        if self._config.find_spell(name) is not None:
            return CommandResult.failure(f"{name} is already tracked as a spell")

        tracker = self._tracker
        reconciler = tracker.reconciler
        if not tracker.context.in_combat:
            # Track under the name the bags show.
            name = reconciler.find_in_bags(name) or name
        self._config.items[name] = icon or DEFAULT_ITEM_ICON
        tracker.rebuild(scan=False)
        if tracker.context.in_combat:
            reconciler.pending = True
            reconciler.deferred = True
            message = f"Now tracking {name}; bags will be checked after combat"
        else:
            reconciler.scan_all(tracker.entries.values(), tracker.now())
            tracker.context.scheduler.mark_dirty()
            entry = tracker.entries[name]
            if entry.is_missing:
                message = f"Now tracking {name} (not in your bags)"
            else:
                message = f"Now tracking {name}"
        logger.info("Now tracking item %s", name)
        return self._changed(CommandResult.success(message))

    def remove(self, name: str) -> CommandResult:
        try:
            name = _require_name(name)
        except InvalidInputError as e:
            return CommandResult.failure(str(e))
        spell = self._config.find_spell(name)
        item = self._config.find_item(name)
        if spell is None and item is None:
            return CommandResult.failure(f"{name} is not tracked")
        if spell is not None:
            self._config.spells.remove(spell)
            self._config.spell_cache.pop(spell, None)
        if item is not None:
            del self._config.items[item]
        self._tracker.rebuild(scan=False)
        removed = spell or item
        logger.info("Stopped tracking %s", removed)
        return self._changed(CommandResult.success(f"Stopped tracking {removed}"))

    def set_size(self, value: Union[str, float, int]) -> CommandResult:
        try:
            size = _parse_number(value, "size", *ICON_SIZE_RANGE)
        except InvalidInputError as e:
            return CommandResult.failure(str(e))
        self._tracker.set_icon_size(int(size) if size.is_integer() else size)
        return self._changed(CommandResult.success(f"Icon size set to {self._config.icon_size:g}"))

    def set_alpha(self, value: Union[str, float, int]) -> CommandResult:
        try:
            alpha = _parse_number(value, "alpha", *ICON_ALPHA_RANGE)
        except InvalidInputError as e:
            return CommandResult.failure(str(e))
        self._tracker.set_icon_alpha(alpha)
        return self._changed(CommandResult.success(f"Icon alpha set to {alpha:g}"))

    def toggle_lock(self) -> CommandResult:
        self._config.locked = not self._config.locked
        state = "locked" if self._config.locked else "unlocked"
        return self._changed(CommandResult.success(f"Frames {state}"))

    def toggle_timer_text(self) -> CommandResult:
        enabled = not self._config.enable_timer_text
        self._tracker.set_timer_text_enabled(enabled)
        state = "enabled" if enabled else "disabled"
        return self._changed(CommandResult.success(f"Timer text {state}"))
