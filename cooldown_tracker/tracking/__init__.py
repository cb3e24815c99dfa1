from cooldown_tracker.tracking.availability import AvailabilityReconciler
from cooldown_tracker.tracking.poller import CooldownPoller
from cooldown_tracker.tracking.resolver import CapabilityResolver

__all__ = ["AvailabilityReconciler", "CapabilityResolver", "CooldownPoller"]
