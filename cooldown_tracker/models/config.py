from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class IconPosition:
    """Saved position of one icon, written when the user drags it."""
    anchor: str = "CENTER"
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> dict:
        return {"anchor": self.anchor, "x": self.x, "y": self.y}


@dataclass
class SpellCacheEntry:
    """Last known spellbook slot and texture for a spell name."""
    texture: str
    slot: int

    def to_dict(self) -> dict:
        return {"texture": self.texture, "slot": self.slot}


def _parse_items(raw: object) -> dict[str, str]:
    """Item name -> icon path. Older files stored {"icon": path} per item."""
    items: dict[str, str] = {}
    if not isinstance(raw, dict):
        return items
    for name, value in raw.items():
        key = str(name or "").strip()
        if not key:
            continue
        if isinstance(value, dict):
            value = value.get("icon")
        items[key] = str(value or "")
    return items


def _parse_spell_cache(raw: object) -> dict[str, SpellCacheEntry]:
    cache: dict[str, SpellCacheEntry] = {}
    if not isinstance(raw, dict):
        return cache
    for name, value in raw.items():
        if not isinstance(value, dict):
            continue
        try:
            cache[str(name)] = SpellCacheEntry(
                texture=str(value.get("texture") or ""),
                slot=int(value.get("slot")),
            )
        except (TypeError, ValueError):
            continue
    return cache


def _parse_icon_positions(raw: object) -> dict[str, IconPosition]:
    positions: dict[str, IconPosition] = {}
    if not isinstance(raw, dict):
        return positions
    for name, value in raw.items():
        if not isinstance(value, dict):
            continue
        try:
            positions[str(name)] = IconPosition(
                anchor=str(value.get("anchor", "CENTER") or "CENTER"),
                x=float(value.get("x", 0.0)),
                y=float(value.get("y", 0.0)),
            )
        except (TypeError, ValueError):
            continue
    return positions


@dataclass
class TrackerConfig:
    """Runtime tracker configuration and the small amount of state persisted with it."""
    locked: bool = True
    icon_anchor: str = "CENTER"
    icon_x: float = 0.0
    icon_y: float = 0.0
    icon_spacing: int = 30
    icon_size: int = 36
    icon_alpha: float = 1.0
    # Seconds between cooldown poll passes
    update_interval: float = 0.1
    enable_timer_text: bool = False
    # Minimum seconds between two full bag scans
    scan_throttle: float = 0.5
    # Spell names in display order
    spells: list[str] = field(default_factory=list)
    # Item name -> default icon path
    items: dict[str, str] = field(default_factory=dict)
    spell_cache: dict[str, SpellCacheEntry] = field(default_factory=dict)
    icon_positions: dict[str, IconPosition] = field(default_factory=dict)

    @property
    def cooldown_scale(self) -> float:
        """Cooldown sweep scale; the sweep model is authored at 32px."""
        return self.icon_size / 32

    def is_tracked(self, name: str) -> bool:
        return self.find_spell(name) is not None or self.find_item(name) is not None

    def find_spell(self, name: str) -> Optional[str]:
        """Configured spell name matching ``name`` case-insensitively."""
        wanted = (name or "").strip().lower()
        for spell in self.spells:
            if spell.lower() == wanted:
                return spell
        return None

    def find_item(self, name: str) -> Optional[str]:
        wanted = (name or "").strip().lower()
        for item in self.items:
            if item.lower() == wanted:
                return item
        return None

    def position_for(self, name: str, icon_count: int) -> IconPosition:
        """Saved position for an icon, else the Nth (1-based) slot of the default row."""
        saved = self.icon_positions.get(name)
        if saved is not None:
            return saved
        return IconPosition(
            anchor=self.icon_anchor,
            x=self.icon_x + (icon_count - 1) * self.icon_spacing,
            y=self.icon_y,
        )

    @classmethod
    def from_dict(cls, data: dict) -> TrackerConfig:
        display = data.get("display", {}) or {}
        timers = data.get("timers", {}) or {}
        tracking = data.get("tracking", {}) or {}
        spells = [str(s).strip() for s in (data.get("spells", []) or []) if str(s or "").strip()]
        return cls(
            locked=bool(display.get("locked", True)),
            icon_anchor=display.get("icon_anchor", "CENTER") or "CENTER",
            icon_x=display.get("icon_x", 0.0),
            icon_y=display.get("icon_y", 0.0),
            icon_spacing=display.get("icon_spacing", 30),
            icon_size=display.get("icon_size", 36),
            icon_alpha=display.get("icon_alpha", 1.0),
            update_interval=tracking.get("update_interval", 0.1),
            scan_throttle=tracking.get("scan_throttle", 0.5),
            enable_timer_text=bool(timers.get("enabled", False)),
            spells=spells,
            items=_parse_items(data.get("items", {})),
            spell_cache=_parse_spell_cache(data.get("spell_cache", {})),
            icon_positions=_parse_icon_positions(data.get("icon_positions", {})),
        )

    def to_dict(self) -> dict:
        """Serialize to dict for JSON config file (round-trip with from_dict)."""
        return {
            "display": {
                "locked": self.locked,
                "icon_anchor": self.icon_anchor,
                "icon_x": self.icon_x,
                "icon_y": self.icon_y,
                "icon_spacing": self.icon_spacing,
                "icon_size": self.icon_size,
                "icon_alpha": self.icon_alpha,
            },
            "timers": {"enabled": self.enable_timer_text},
            "tracking": {
                "update_interval": self.update_interval,
                "scan_throttle": self.scan_throttle,
            },
            "spells": list(self.spells),
            "items": dict(self.items),
            "spell_cache": {name: e.to_dict() for name, e in self.spell_cache.items()},
            "icon_positions": {
                name: p.to_dict() for name, p in self.icon_positions.items()
            },
        }
