"""Signals delivered by the host, dispatched through CooldownTracker.handle()."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from cooldown_tracker.models import CapabilityKind


@dataclass(frozen=True)
class CooldownChanged:
    """Some spell or item cooldown changed host side."""
    kind: CapabilityKind = CapabilityKind.SPELL


@dataclass(frozen=True)
class InventoryChanged:
    container: int | None = None


@dataclass(frozen=True)
class SpellbookChanged:
    pass


@dataclass(frozen=True)
class CombatEntered:
    pass


@dataclass(frozen=True)
class CombatExited:
    pass


@dataclass(frozen=True)
class Tick:
    elapsed: float


HostEvent = Union[
    CooldownChanged,
    InventoryChanged,
    SpellbookChanged,
    CombatEntered,
    CombatExited,
    Tick,
]
