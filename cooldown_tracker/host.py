"""Host query surface the tracker reads from.

The game client (or a test double) implements these calls. Every query may
return ``None`` when the host has nothing at that address; callers treat that
as "no reading this pass", never as a fatal error.
"""
from __future__ import annotations

from typing import Optional, Protocol, Sequence

# (start, duration, enabled) as reported by the host
CooldownReading = tuple[float, float, int]


class HostApi(Protocol):
    def spellbook_tabs(self) -> Sequence[tuple[int, int]]:
        """(offset, count) for each spellbook tab; slots are 1-based within a tab."""
        ...

    def spell_name(self, slot: int) -> Optional[str]:
        ...

    def spell_texture(self, slot: int) -> Optional[str]:
        ...

    def spell_cooldown(self, slot: int) -> Optional[CooldownReading]:
        ...

    def containers(self) -> Sequence[int]:
        """Ids of every bag the player can reach."""
        ...

    def container_size(self, container: int) -> int:
        ...

    def item_link(self, container: int, slot: int) -> Optional[str]:
        ...

    def item_cooldown(self, container: int, slot: int) -> Optional[CooldownReading]:
        ...

    def wall_clock(self) -> float:
        """Seconds since the epoch."""
        ...

    def uptime(self) -> float:
        """High resolution seconds since boot; wraps every 2**32 ms."""
        ...
