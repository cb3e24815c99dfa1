import unittest

from cooldown_tracker.events import (
    CombatEntered,
    CombatExited,
    CooldownChanged,
    InventoryChanged,
    SpellbookChanged,
    Tick,
)
from cooldown_tracker.models import (
    MISSING_ALPHA,
    AvailabilityStatus,
    CapabilityKind,
    SpellCacheEntry,
    TrackerConfig,
)
from cooldown_tracker.timers import NEUTRAL_COLOR
from cooldown_tracker.tracker import CooldownTracker
from tests.fakes import FakeHost

GRENADE = "Thorium Grenade"


def make_config(**overrides) -> TrackerConfig:
    config = TrackerConfig(
        spells=["Earth Shock", "Chain Lightning"],
        items={GRENADE: "Interface\\Icons\\INV_Misc_Bomb_08"},
    )
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


class CooldownTrackerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.host = FakeHost()
        self.host.set_spells(["Attack", "Earth Shock", "Chain Lightning"])
        self.host.put_item(0, 1, GRENADE)
        self.config = make_config()
        self.tracker = CooldownTracker(self.host, self.config)
        self.observed: list[tuple] = []
        self.availability: list[tuple] = []
        self.texts: list[tuple] = []
        self.rebuilt: list[list] = []
        self.tracker.cooldown_observed.connect(
            lambda name, start, duration, enabled: self.observed.append((name, start, duration, enabled))
        )
        self.tracker.availability_changed.connect(
            lambda name, missing, alpha: self.availability.append((name, missing, alpha))
        )
        self.tracker.timer_text_changed.connect(lambda name, text: self.texts.append((name, text)))
        self.tracker.capabilities_rebuilt.connect(lambda entries: self.rebuilt.append(entries))

    def test_start_builds_spells_then_items(self) -> None:
        self.tracker.start()
        self.assertEqual(list(self.tracker.entries), ["Earth Shock", "Chain Lightning", GRENADE])
        self.assertEqual(self.tracker.entries[GRENADE].kind, CapabilityKind.ITEM)
        self.assertEqual(self.tracker.entries[GRENADE].availability, AvailabilityStatus.PRESENT)
        self.assertEqual(self.config.spell_cache["Chain Lightning"].slot, 3)
        self.assertEqual(len(self.rebuilt), 1)
        positions = [e.position.x for e in self.tracker.entries.values()]
        self.assertEqual(positions, [0, 30, 60])

    def test_unknown_spell_is_skipped_not_fatal(self) -> None:
        self.config.spells.insert(0, "Frostbolt")
        self.tracker.start()
        self.assertNotIn("Frostbolt", self.tracker.entries)
        self.assertEqual(self.tracker.context.unresolved, ["Frostbolt"])
        self.assertIn("Earth Shock", self.tracker.entries)

    def test_tick_polls_only_when_dirty_and_interval_elapsed(self) -> None:
        self.host.spell_cooldowns["Earth Shock"] = (1000.0, 6.0, 1)
        self.tracker.start()
        self.tracker.handle(Tick(0.05))
        self.assertEqual(self.host.spell_cooldown_calls, 0)
        self.tracker.handle(Tick(0.05))
        self.assertEqual(self.host.spell_cooldown_calls, 2)
        self.assertEqual(self.observed, [("Earth Shock", 1000.0, 6.0, 1)])

        self.tracker.handle(Tick(0.1))
        self.assertEqual(self.host.spell_cooldown_calls, 2)

        self.tracker.handle(CooldownChanged())
        self.tracker.handle(Tick(0.1))
        self.assertEqual(self.host.spell_cooldown_calls, 4)
        self.assertEqual(len(self.observed), 1)

    def test_cooldown_end_is_published_as_clear(self) -> None:
        self.host.spell_cooldowns["Earth Shock"] = (1000.0, 6.0, 1)
        self.tracker.start()
        self.tracker.handle(Tick(0.1))
        self.host.spell_cooldowns["Earth Shock"] = (0.0, 0.0, 1)
        self.tracker.handle(CooldownChanged())
        self.tracker.handle(Tick(0.1))
        self.assertEqual(self.observed[-1], ("Earth Shock", 0.0, 0.0, 0))

    def test_inventory_signals_in_combat_never_full_scan(self) -> None:
        self.tracker.start()
        scans = self.tracker.reconciler.scan_count
        self.tracker.handle(CombatEntered())
        for _ in range(3):
            self.host.advance(1.0)
            self.tracker.handle(InventoryChanged(container=0))
            self.tracker.handle(Tick(0.1))
        self.assertEqual(self.tracker.reconciler.scan_count, scans)
        self.assertEqual(self.tracker.reconciler.verify_count, 3)

        self.tracker.handle(CombatExited())
        self.assertEqual(self.tracker.reconciler.scan_count, scans + 1)
        self.host.advance(1.0)
        self.tracker.handle(Tick(0.1))
        self.assertEqual(self.tracker.reconciler.scan_count, scans + 1)

    def test_item_leaving_bags_during_combat_is_dimmed(self) -> None:
        self.tracker.start()
        self.tracker.handle(CombatEntered())
        self.host.take_item(0, 1)
        self.tracker.handle(InventoryChanged(container=0))
        self.assertEqual(self.availability[-1], (GRENADE, True, MISSING_ALPHA))

    def test_throttled_scan_is_drained_by_item_cooldown_signal(self) -> None:
        self.tracker.start()
        scans = self.tracker.reconciler.scan_count
        self.host.advance(0.1)
        self.tracker.handle(InventoryChanged())
        self.assertEqual(self.tracker.reconciler.scan_count, scans)
        self.host.advance(0.5)
        self.tracker.handle(CooldownChanged(kind=CapabilityKind.ITEM))
        self.assertEqual(self.tracker.reconciler.scan_count, scans + 1)

    def test_spellbook_change_re_resolves_shifted_slots(self) -> None:
        self.tracker.start()
        self.host.set_spells(["Attack", "Lightning Shield", "Earth Shock", "Chain Lightning"])
        self.tracker.handle(SpellbookChanged())
        self.assertEqual(self.tracker.entries["Chain Lightning"].capability.slot, 4)
        self.assertEqual(self.config.spell_cache["Chain Lightning"].slot, 4)
        self.assertEqual(self.tracker.entries[GRENADE].availability, AvailabilityStatus.PRESENT)
        self.assertEqual(len(self.rebuilt), 2)

    def test_stale_persisted_cache_is_corrected(self) -> None:
        self.config.spell_cache["Earth Shock"] = SpellCacheEntry("old", 7)
        self.tracker.start()
        self.assertEqual(self.tracker.entries["Earth Shock"].capability.slot, 2)
        self.assertEqual(self.config.spell_cache["Earth Shock"].slot, 2)

    def test_missing_item_cooldown_survives_rebuild(self) -> None:
        self.host.item_cooldowns[GRENADE] = (995.0, 60.0, 1)
        self.tracker.start()
        self.tracker.handle(Tick(0.1))
        self.assertEqual(self.observed[-1], (GRENADE, 995.0, 60.0, 1))

        self.host.take_item(0, 1)
        self.host.advance(1.0)
        self.tracker.handle(InventoryChanged())
        self.assertTrue(self.tracker.entries[GRENADE].is_missing)
        observed_before = len(self.observed)

        self.tracker.handle(SpellbookChanged())
        self.tracker.handle(Tick(0.1))
        self.assertEqual(self.tracker.entries[GRENADE].cooldown.start, 995.0)
        self.assertEqual(self.tracker.entries[GRENADE].alpha, MISSING_ALPHA)
        grenade_updates = [o for o in self.observed[observed_before:] if o[0] == GRENADE]
        self.assertEqual(grenade_updates, [(GRENADE, 995.0, 60.0, 1)])

    def test_set_icon_size_emits_scale(self) -> None:
        sizes: list[tuple] = []
        self.tracker.size_changed.connect(lambda size, scale: sizes.append((size, scale)))
        self.tracker.set_icon_size(64)
        self.assertEqual(self.config.icon_size, 64)
        self.assertEqual(sizes, [(64.0, 2.0)])

    def test_timer_text_follows_cooldown(self) -> None:
        self.config.enable_timer_text = True
        self.host.spell_cooldowns["Earth Shock"] = (1000.0, 30.0, 1)
        self.tracker.start()
        self.tracker.handle(Tick(0.1))
        self.assertEqual(self.texts, [("Earth Shock", NEUTRAL_COLOR + "30")])

        self.host.spell_cooldowns["Earth Shock"] = (0.0, 0.0, 1)
        self.tracker.handle(CooldownChanged())
        self.tracker.handle(Tick(0.1))
        self.assertEqual(self.texts[-1], ("Earth Shock", ""))

    def test_timer_text_disabled_emits_nothing(self) -> None:
        self.host.spell_cooldowns["Earth Shock"] = (1000.0, 30.0, 1)
        self.tracker.start()
        self.tracker.handle(Tick(0.1))
        self.assertEqual(self.texts, [])

    def test_set_icon_alpha_skips_missing_items(self) -> None:
        self.host.take_item(0, 1)
        self.tracker.start()
        alphas: list[tuple] = []
        self.tracker.alpha_changed.connect(lambda name, alpha: alphas.append((name, alpha)))
        self.tracker.set_icon_alpha(0.5)
        self.assertEqual(alphas, [("Earth Shock", 0.5), ("Chain Lightning", 0.5)])
        self.assertEqual(self.tracker.entries[GRENADE].alpha, MISSING_ALPHA)
        self.assertEqual(self.tracker.entries[GRENADE].configured_alpha, 0.5)

    def test_save_icon_position_requires_unlock(self) -> None:
        self.tracker.start()
        self.assertFalse(self.tracker.save_icon_position("Earth Shock", "TOPLEFT", 10, 20))
        self.config.locked = False
        self.assertTrue(self.tracker.save_icon_position("Earth Shock", "TOPLEFT", 10, 20))
        self.assertEqual(self.config.icon_positions["Earth Shock"].x, 10)
        self.tracker.rebuild()
        self.assertEqual(self.tracker.entries["Earth Shock"].position.anchor, "TOPLEFT")

    def test_status_of(self) -> None:
        self.host.spell_cooldowns["Earth Shock"] = (1000.0, 30.0, 1)
        self.tracker.start()
        self.tracker.handle(Tick(0.1))
        entries = self.tracker.entries
        self.assertEqual(self.tracker.status_of(entries["Earth Shock"]), "cooldown")
        self.assertEqual(self.tracker.status_of(entries["Chain Lightning"]), "ready")
        self.host.take_item(0, 1)
        self.host.advance(1.0)
        self.tracker.handle(InventoryChanged())
        self.assertEqual(self.tracker.status_of(entries[GRENADE]), "missing")


if __name__ == "__main__":
    unittest.main()
