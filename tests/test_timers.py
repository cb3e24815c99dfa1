import unittest

from cooldown_tracker.timers import (
    NEUTRAL_COLOR,
    URGENT_COLOR,
    WARNING_COLOR,
    WRAP_SECONDS,
    CountdownText,
    format_cooldown_time,
    remaining_time,
)

BOOT_WALL_TIME = 1_700_000_000.0


class FormatCooldownTimeTests(unittest.TestCase):
    def test_non_positive_is_empty(self) -> None:
        self.assertEqual(format_cooldown_time(0), "")
        self.assertEqual(format_cooldown_time(-3.5), "")

    def test_seconds_round_up(self) -> None:
        self.assertEqual(format_cooldown_time(4.2), URGENT_COLOR + "5")
        self.assertEqual(format_cooldown_time(0.01), URGENT_COLOR + "1")
        self.assertEqual(format_cooldown_time(59.5), NEUTRAL_COLOR + "60")

    def test_color_tiers(self) -> None:
        self.assertTrue(format_cooldown_time(4.99).startswith(URGENT_COLOR))
        self.assertEqual(format_cooldown_time(5), WARNING_COLOR + "5")
        self.assertEqual(format_cooldown_time(9.99), WARNING_COLOR + "10")
        self.assertEqual(format_cooldown_time(10), NEUTRAL_COLOR + "10")

    def test_minutes_and_hours(self) -> None:
        self.assertEqual(format_cooldown_time(60), NEUTRAL_COLOR + "1m")
        self.assertEqual(format_cooldown_time(61), NEUTRAL_COLOR + "2m")
        self.assertEqual(format_cooldown_time(3599), NEUTRAL_COLOR + "60m")
        self.assertEqual(format_cooldown_time(3601), NEUTRAL_COLOR + "2h")


class RemainingTimeTests(unittest.TestCase):
    def _wrapped_remaining(self, start: float, duration: float, real_uptime: float) -> float:
        """What the host reports once the 32-bit counter has wrapped."""
        uptime = real_uptime % WRAP_SECONDS
        wall_clock = BOOT_WALL_TIME + real_uptime
        return remaining_time(start, duration, uptime, wall_clock)

    def test_normal_branch(self) -> None:
        self.assertAlmostEqual(remaining_time(100.0, 30.0, 110.0, BOOT_WALL_TIME + 110.0), 20.0)

    def test_rollover_matches_unwrapped_clock(self) -> None:
        start = WRAP_SECONDS - 100.0
        duration = 300.0
        real_uptime = WRAP_SECONDS + 50.0
        expected = duration - (real_uptime - start)
        self.assertAlmostEqual(self._wrapped_remaining(start, duration, real_uptime), expected, places=3)
        self.assertAlmostEqual(expected, 150.0, places=3)

    def test_rollover_is_continuous_across_wrap(self) -> None:
        start = WRAP_SECONDS - 100.0
        duration = 300.0
        before = self._wrapped_remaining(start, duration, WRAP_SECONDS - 0.001)
        after = self._wrapped_remaining(start, duration, WRAP_SECONDS + 0.001)
        self.assertAlmostEqual(before, 200.001, places=3)
        self.assertAlmostEqual(after, 199.999, places=3)
        self.assertLess(abs(before - after), 0.01)

    def test_rollover_expired_cooldown_is_not_positive(self) -> None:
        start = WRAP_SECONDS - 10.0
        self.assertLessEqual(self._wrapped_remaining(start, 5.0, WRAP_SECONDS + 20.0), 0)


class CountdownTextTests(unittest.TestCase):
    def test_short_cooldowns_have_no_text(self) -> None:
        text = CountdownText()
        text.set_timer(100.0, 1.5, 1)
        self.assertFalse(text.shown)

    def test_disabled_cooldown_has_no_text(self) -> None:
        text = CountdownText()
        text.set_timer(100.0, 30.0, 0)
        self.assertFalse(text.shown)

    def test_refresh_counts_down_and_hides(self) -> None:
        text = CountdownText()
        text.set_timer(100.0, 30.0, 1)
        self.assertTrue(text.shown)
        self.assertTrue(text.refresh(110.0, BOOT_WALL_TIME + 110.0))
        self.assertEqual(text.text, NEUTRAL_COLOR + "20")
        self.assertTrue(text.refresh(125.5, BOOT_WALL_TIME + 125.5))
        self.assertEqual(text.text, URGENT_COLOR + "5")
        self.assertTrue(text.refresh(131.0, BOOT_WALL_TIME + 131.0))
        self.assertFalse(text.shown)
        self.assertEqual(text.text, "")

    def test_refresh_is_throttled(self) -> None:
        text = CountdownText(refresh_interval=0.1)
        text.set_timer(100.0, 30.0, 1)
        self.assertTrue(text.refresh(110.0, BOOT_WALL_TIME + 110.0))
        self.assertFalse(text.refresh(110.05, BOOT_WALL_TIME + 110.05))

    def test_clear_hides(self) -> None:
        text = CountdownText()
        text.set_timer(100.0, 30.0, 1)
        text.refresh(101.0, BOOT_WALL_TIME + 101.0)
        text.set_timer(0.0, 0.0, 0)
        self.assertFalse(text.shown)
        self.assertEqual(text.text, "")


if __name__ == "__main__":
    unittest.main()
