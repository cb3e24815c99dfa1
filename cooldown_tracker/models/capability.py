from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from cooldown_tracker.models.config import IconPosition
from cooldown_tracker.timers import CountdownText


# Alpha applied to an item icon while the item is not in any bag.
MISSING_ALPHA = 0.28

DEFAULT_ITEM_ICON = "Interface\\Icons\\INV_Misc_QuestionMark"


class CapabilityKind(Enum):
    SPELL = "spell"
    ITEM = "item"


class AvailabilityStatus(Enum):
    UNKNOWN = "unknown"
    PRESENT = "present"
    MISSING = "missing"


@dataclass(frozen=True)
class StorageLocation:
    """A bag slot holding a tracked item stack."""
    container: int
    slot: int


@dataclass
class SpellCapability:
    """A spell resolved to its spellbook slot for this session."""
    name: str
    icon: str
    slot: int

    @property
    def kind(self) -> CapabilityKind:
        return CapabilityKind.SPELL


@dataclass
class ItemCapability:
    """A consumable tracked by name; its bag locations are volatile."""
    name: str
    icon: str
    locations: list[StorageLocation] = field(default_factory=list)

    @property
    def kind(self) -> CapabilityKind:
        return CapabilityKind.ITEM

    @property
    def first_location(self) -> Optional[StorageLocation]:
        # Stacks of the same item share one cooldown, any location will do.
        return self.locations[0] if self.locations else None


Capability = Union[SpellCapability, ItemCapability]


@dataclass(frozen=True)
class CooldownObservation:
    """One (start, duration, enabled) reading from the host."""
    start: float
    duration: float
    enabled: int = 1

    @property
    def is_running(self) -> bool:
        return self.start > 0 and self.duration > 0

    @classmethod
    def cleared(cls) -> CooldownObservation:
        return cls(0.0, 0.0, 0)


@dataclass
class CooldownState:
    """Last published cooldown for a capability."""
    start: float = 0.0
    duration: float = 0.0
    enabled: int = 1
    last_change: float = 0.0
    active: bool = False

    def differs(self, observation: CooldownObservation) -> bool:
        return self.start != observation.start or self.duration != observation.duration

    def apply(self, observation: CooldownObservation, now: float) -> bool:
        """Overwrite with the observation if (start, duration) changed.

        Returns True when the state was overwritten. ``enabled`` is refreshed
        either way but never counts as a change on its own.
        """
        self.enabled = observation.enabled
        if not self.differs(observation):
            return False
        self.start = observation.start
        self.duration = observation.duration
        self.last_change = now
        self.active = observation.is_running
        return True

    def is_active(self, now: float) -> bool:
        return self.start > 0 and self.duration > 0 and now < self.start + self.duration


@dataclass
class TrackedEntry:
    """Everything the tracker knows about one tracked capability."""
    capability: Capability
    cooldown: CooldownState = field(default_factory=CooldownState)
    availability: AvailabilityStatus = AvailabilityStatus.UNKNOWN
    configured_alpha: float = 1.0
    alpha: float = 1.0
    countdown: CountdownText = field(default_factory=CountdownText)
    position: IconPosition = field(default_factory=IconPosition)

    @property
    def name(self) -> str:
        return self.capability.name

    @property
    def kind(self) -> CapabilityKind:
        return self.capability.kind

    @property
    def is_item(self) -> bool:
        return self.capability.kind == CapabilityKind.ITEM

    @property
    def is_missing(self) -> bool:
        return self.availability == AvailabilityStatus.MISSING


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a user-initiated command."""
    ok: bool
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> CommandResult:
        return cls(True, message)

    @classmethod
    def failure(cls, message: str) -> CommandResult:
        return cls(False, message)
