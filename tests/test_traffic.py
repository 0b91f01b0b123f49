from __future__ import annotations

import os
import random
import sys
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from hopper_sim.config import GameConfig  # noqa: E402
from hopper_sim.traffic import LaneTrafficController, TrafficSimulation  # noqa: E402


def make_lane(config: GameConfig, direction: int = 1, seed: int = 0) -> LaneTrafficController:
    return LaneTrafficController(
        index=0,
        y=120.0,
        kind="wolf",
        direction=direction,
        speed=150.0,
        traffic_mult=1.0,
        config=config,
        rng=random.Random(seed),
    )


class TestLaneTrafficController(unittest.TestCase):
    def test_obstacles_ordered_leading_first(self) -> None:
        config = GameConfig()
        right = make_lane(config, direction=1)
        for x in (100.0, 300.0, 200.0):
            right.spawn_obstacle(x)
        self.assertEqual([ob.x for ob in right.obstacles], [300.0, 200.0, 100.0])
        self.assertEqual(right.trailing.x, 100.0)

        left = make_lane(config, direction=-1)
        for x in (100.0, 300.0, 200.0):
            left.spawn_obstacle(x)
        self.assertEqual([ob.x for ob in left.obstacles], [100.0, 200.0, 300.0])
        self.assertEqual(left.trailing.x, 300.0)

    def test_spawn_edge_and_trailing_distance(self) -> None:
        config = GameConfig()
        right = make_lane(config, direction=1)
        left = make_lane(config, direction=-1)
        self.assertEqual(right.spawn_edge_x, -100.0)
        self.assertEqual(left.spawn_edge_x, 900.0)
        self.assertIsNone(right.trailing_distance())
        right.spawn_obstacle(50.0)
        left.spawn_obstacle(700.0)
        self.assertAlmostEqual(right.trailing_distance(), 150.0)
        self.assertAlmostEqual(left.trailing_distance(), 200.0)

    def test_initial_delay_uses_traffic_multiplier(self) -> None:
        config = GameConfig()
        lane = LaneTrafficController(0, 120.0, "wolf", 1, 150.0, 1.6, config, random.Random(3))
        low, high = config.spawn_interval_range
        self.assertGreaterEqual(lane.next_spawn_delay, low * 1.6)
        self.assertLessEqual(lane.next_spawn_delay, high * 1.6)

    def test_waits_for_spawn_delay(self) -> None:
        config = GameConfig()
        lane = make_lane(config)
        lane.next_spawn_delay = 2.0
        self.assertFalse(lane.can_spawn(1.99, 0, 10))
        self.assertTrue(lane.can_spawn(2.0, 0, 10))

    def test_respects_lane_and_global_caps(self) -> None:
        config = GameConfig()
        lane = make_lane(config)
        lane.next_spawn_delay = 0.0
        self.assertFalse(lane.can_spawn(10.0, 10, 10))
        lane.spawn_obstacle(600.0)
        lane.spawn_obstacle(400.0)
        self.assertFalse(lane.can_spawn(10.0, 2, 10))

    def test_min_gap_blocks_spawn(self) -> None:
        config = GameConfig()
        lane = make_lane(config)
        lane.next_spawn_delay = 0.0
        trailing = lane.spawn_obstacle(0.0)
        self.assertFalse(lane.can_spawn(10.0, 1, 10))
        self.assertEqual(lane.try_spawn(10.0, 1, 10), [])
        self.assertEqual(lane.active_count, 1)

        trailing.x = config.min_gap - config.offscreen_margin
        self.assertTrue(lane.can_spawn(10.0, 1, 10))

    def test_single_spawn(self) -> None:
        config = GameConfig(group_chance=0.0)
        lane = make_lane(config)
        lane.next_spawn_delay = 0.0
        spawned = lane.try_spawn(5.0, 0, 10)
        self.assertEqual(len(spawned), 1)
        self.assertEqual(spawned[0].x, -100.0)
        self.assertEqual(spawned[0].speed, lane.speed)
        self.assertEqual(spawned[0].direction, lane.direction)
        self.assertEqual(spawned[0].y, lane.y)
        self.assertEqual(lane.last_spawn_at, 5.0)
        low, high = config.spawn_interval_range
        self.assertGreaterEqual(lane.next_spawn_delay, low)
        self.assertLessEqual(lane.next_spawn_delay, high)

    def test_train_spawn_spacing_and_cooldown(self) -> None:
        config = GameConfig(group_chance=1.0, max_active_per_lane=5)
        lane = make_lane(config, direction=-1)
        lane.next_spawn_delay = 0.0
        spawned = lane.try_spawn(5.0, 0, 10)
        self.assertEqual([ob.x for ob in spawned], [900.0, 1000.0, 1100.0])
        self.assertEqual(lane.trailing.x, 1100.0)
        low, high = config.spawn_interval_range
        self.assertGreaterEqual(lane.next_spawn_delay, low + config.train_cooldown)
        self.assertLessEqual(lane.next_spawn_delay, high + config.train_cooldown)

    def test_train_clipped_to_capacity(self) -> None:
        config = GameConfig(group_chance=1.0)
        lane = make_lane(config)
        lane.next_spawn_delay = 0.0
        self.assertEqual(len(lane.try_spawn(5.0, 0, 10)), config.max_active_per_lane)

        other = make_lane(GameConfig(group_chance=1.0, max_active_per_lane=5))
        other.next_spawn_delay = 0.0
        self.assertEqual(len(other.try_spawn(5.0, 9, 10)), 1)


class TestTrafficSimulation(unittest.TestCase):
    def test_lanes_alternate_kind_and_direction(self) -> None:
        config = GameConfig()
        sim = TrafficSimulation(config, random.Random(1))
        self.assertEqual(len(sim.lanes), len(config.lane_ys))
        for index, lane in enumerate(sim.lanes):
            self.assertEqual(lane.y, config.lane_ys[index])
            self.assertEqual(lane.kind, "wolf" if index % 2 == 0 else "fox")
            self.assertEqual(lane.direction, 1 if index % 2 == 0 else -1)
            low, high = config.speed_range(lane.kind)
            self.assertGreaterEqual(lane.speed, low)
            self.assertLessEqual(lane.speed, high)
            self.assertEqual(lane.traffic_mult, config.lane_traffic_multipliers[index])

    def test_caps_and_spacing_hold_over_long_run(self) -> None:
        config = GameConfig(global_max_obstacles=5, group_chance=0.5, max_active_per_lane=3)
        sim = TrafficSimulation(config, random.Random(7))
        elapsed = 0.0
        spawned_any = False
        for _ in range(3000):
            elapsed += config.dt
            sim.step(elapsed, config.dt)
            self.assertLessEqual(len(sim.obstacles), config.global_max_obstacles)
            self.assertLessEqual(sim.active_count, config.global_max_obstacles)
            for lane in sim.lanes:
                self.assertLessEqual(lane.active_count, config.max_active_per_lane)
                positions = [ob.x for ob in lane.obstacles]
                for lead, trail in zip(positions, positions[1:]):
                    gap = (lead - trail) * lane.direction
                    self.assertGreaterEqual(gap, config.train_spacing - 1e-6)
            spawned_any = spawned_any or bool(sim.obstacles)
        self.assertTrue(spawned_any)

    def test_retired_obstacles_leave_live_list(self) -> None:
        config = GameConfig()
        sim = TrafficSimulation(config, random.Random(2))
        for lane in sim.lanes:
            lane.next_spawn_delay = 1e9
        obstacle = sim.place(0, config.width + config.offscreen_margin - 0.5)
        sim.step(0.0, config.dt)
        self.assertFalse(obstacle.active)
        self.assertNotIn(obstacle, sim.obstacles)
        self.assertNotIn(obstacle, sim.lanes[0].obstacles)

    def test_no_spawn_while_trailing_inside_min_gap(self) -> None:
        config = GameConfig()
        sim = TrafficSimulation(config, random.Random(4))
        for other in sim.lanes[1:]:
            other.next_spawn_delay = 1e9
        lane = sim.lanes[0]
        blocker = sim.place(0, -50.0)
        lane.next_spawn_delay = 0.0

        sim.step(100.0, config.dt)
        self.assertEqual(lane.active_count, 1)

        blocker.x = 300.0
        sim.step(100.0, config.dt)
        self.assertEqual(lane.active_count, 2)

    def test_clear_empties_everything(self) -> None:
        config = GameConfig()
        sim = TrafficSimulation(config, random.Random(5))
        obstacle = sim.place(1, 400.0)
        sim.clear()
        self.assertEqual(sim.obstacles, [])
        self.assertEqual(sim.active_count, 0)
        self.assertFalse(obstacle.active)


if __name__ == "__main__":
    unittest.main()
