"""Capability resolver — maps tracked names to live spellbook slots.

Spells are found by a case-insensitive walk over the spellbook tabs. Slot
indices only hold for the current spellbook: learning a new rank shifts them,
so cached slots are verified on every spellbook change and silently
re-resolved when stale. Items have no fixed slot; their bag locations are
owned by the availability reconciler.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

from cooldown_tracker.errors import StaleHandleError
from cooldown_tracker.host import HostApi
from cooldown_tracker.models import (
    Capability,
    CapabilityKind,
    ItemCapability,
    SpellCacheEntry,
    SpellCapability,
)

logger = logging.getLogger(__name__)

_LINK_NAME = re.compile(r"\[(.+)\]")


class CapabilityResolver:
    """Resolves names against the host spellbook and parses item links."""

    def __init__(self, host: HostApi):
        self._host = host
        self._link_names: dict[str, Optional[str]] = {}

    def resolve(self, name: str, kind: CapabilityKind, icon: str = "") -> Optional[Capability]:
        """Return a capability for ``name`` or None when nothing matches."""
        if kind == CapabilityKind.ITEM:
            return ItemCapability(name=name, icon=icon)
        return self.find_spell(name)

    def find_spell(self, name: str) -> Optional[SpellCapability]:
        wanted = (name or "").strip().lower()
        if not wanted:
            return None
        for offset, count in self._host.spellbook_tabs() or []:
            for i in range(1, count + 1):
                slot = offset + i
                book_name = self._host.spell_name(slot)
                if book_name and book_name.lower() == wanted:
                    texture = self._host.spell_texture(slot) or ""
                    return SpellCapability(name=name, icon=texture, slot=slot)
        logger.debug("Spell %r not found in spellbook", name)
        return None

    def verify(self, spell: SpellCapability) -> None:
        """Raise StaleHandleError if the spell's slot now holds something else."""
        found = self._host.spell_name(spell.slot)
        if not found or found.lower() != spell.name.lower():
            raise StaleHandleError(spell.name, spell.slot, found)

    def refresh(self, spell: SpellCapability) -> Optional[SpellCapability]:
        """Return the spell unchanged if its slot still matches, else re-resolve it."""
        try:
            self.verify(spell)
            return spell
        except StaleHandleError as e:
            logger.debug("Re-resolving stale spell handle: %s", e)
            return self.find_spell(spell.name)

    def from_cache(self, name: str, entry: SpellCacheEntry) -> Optional[SpellCapability]:
        """Rebuild a spell from a persisted cache entry, re-resolving if it went stale."""
        return self.refresh(SpellCapability(name=name, icon=entry.texture, slot=entry.slot))

    def item_name_from_link(self, link: Optional[str]) -> Optional[str]:
        """Display name inside an item link's brackets, e.g. ``|Hitem:...|h[Name]|h``."""
        if not link:
            return None
        if link in self._link_names:
            return self._link_names[link]
        match = _LINK_NAME.search(link)
        name = match.group(1) if match else None
        self._link_names[link] = name
        return name

    def item_name_at(self, container: int, slot: int) -> Optional[str]:
        return self.item_name_from_link(self._host.item_link(container, slot))
