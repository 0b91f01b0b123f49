from __future__ import annotations

import os
import sys
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from hopper_sim.config import GameConfig  # noqa: E402
from hopper_sim.player import Goal, InputSnapshot, Player  # noqa: E402


class TestPlayer(unittest.TestCase):
    def test_starts_at_start_position(self) -> None:
        player = Player(GameConfig())
        self.assertEqual((player.x, player.y), (400.0, 520.0))
        self.assertFalse(player.moving)

    def test_moves_at_fixed_speed(self) -> None:
        config = GameConfig()
        player = Player(config)
        player.update(InputSnapshot(up=True, left=True), config.dt)
        self.assertAlmostEqual(player.x, 400.0 - 5.0)
        self.assertAlmostEqual(player.y, 520.0 - 5.0)
        self.assertTrue(player.moving)

        player.update(InputSnapshot(), config.dt)
        self.assertFalse(player.moving)

    def test_clamped_inside_field(self) -> None:
        config = GameConfig()
        player = Player(config)
        for inputs in (InputSnapshot(up=True, left=True), InputSnapshot(down=True, right=True)):
            for _ in range(400):
                player.update(inputs, config.dt)
                self.assertGreaterEqual(player.x, player.radius)
                self.assertLessEqual(player.x, config.width - player.radius)
                self.assertGreaterEqual(player.y, player.radius)
                self.assertLessEqual(player.y, config.height - player.radius)
        self.assertAlmostEqual(player.x, config.width - player.radius)
        self.assertAlmostEqual(player.y, config.height - player.radius)

    def test_reset(self) -> None:
        config = GameConfig()
        player = Player(config)
        player.update(InputSnapshot(right=True), config.dt)
        player.reset()
        self.assertEqual((player.x, player.y), config.player_start)
        self.assertFalse(player.moving)


class TestGoal(unittest.TestCase):
    def test_pulse_stays_in_range(self) -> None:
        config = GameConfig()
        goal = Goal(config)
        low, high = config.goal_pulse_range
        seen_high = seen_low = False
        for _ in range(1000):
            goal.update_pulse(config.dt)
            self.assertGreaterEqual(goal.pulse_scale, low)
            self.assertLessEqual(goal.pulse_scale, high)
            seen_high = seen_high or goal.pulse_scale == high
            seen_low = seen_low or goal.pulse_scale == low
        self.assertTrue(seen_high and seen_low)

    def test_box_ignores_pulse(self) -> None:
        goal = Goal(GameConfig())
        before = goal.box()
        for _ in range(10):
            goal.update_pulse(1.0 / 60.0)
        self.assertEqual(goal.box(), before)
        self.assertEqual((before.width, before.height), (30.0, 40.0))


if __name__ == "__main__":
    unittest.main()
