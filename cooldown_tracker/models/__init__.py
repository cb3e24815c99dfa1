from cooldown_tracker.models.capability import (
    DEFAULT_ITEM_ICON,
    MISSING_ALPHA,
    AvailabilityStatus,
    Capability,
    CapabilityKind,
    CommandResult,
    CooldownObservation,
    CooldownState,
    ItemCapability,
    SpellCapability,
    StorageLocation,
    TrackedEntry,
)
from cooldown_tracker.models.config import IconPosition, SpellCacheEntry, TrackerConfig

__all__ = [
    "DEFAULT_ITEM_ICON",
    "MISSING_ALPHA",
    "AvailabilityStatus",
    "Capability",
    "CapabilityKind",
    "CommandResult",
    "CooldownObservation",
    "CooldownState",
    "IconPosition",
    "ItemCapability",
    "SpellCacheEntry",
    "SpellCapability",
    "StorageLocation",
    "TrackedEntry",
    "TrackerConfig",
]
