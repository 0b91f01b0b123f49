from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional

from .config import GameConfig
from .obstacle import Obstacle

logger = logging.getLogger(__name__)


class LaneTrafficController:
    """Owns one lane's obstacles and decides when the lane spawns."""

    def __init__(
        self,
        index: int,
        y: float,
        kind: str,
        direction: int,
        speed: float,
        traffic_mult: float,
        config: GameConfig,
        rng: random.Random,
    ) -> None:
        self.index = index
        self.y = y
        self.kind = kind
        self.direction = direction
        self.speed = speed
        self.traffic_mult = traffic_mult
        self.max_active = config.max_active_per_lane
        self.config = config
        self.rng = rng

        # Leading obstacle first, trailing obstacle last.
        self.obstacles: List[Obstacle] = []
        self.last_spawn_at = 0.0
        self.next_spawn_delay = self._draw_delay(spawned=1)

    @property
    def active_count(self) -> int:
        return len(self.obstacles)

    @property
    def spawn_edge_x(self) -> float:
        if self.direction > 0:
            return -self.config.offscreen_margin
        return self.config.width + self.config.offscreen_margin

    @property
    def trailing(self) -> Optional[Obstacle]:
        return self.obstacles[-1] if self.obstacles else None

    def trailing_distance(self) -> Optional[float]:
        trailing = self.trailing
        if trailing is None:
            return None
        return (trailing.x - self.spawn_edge_x) * self.direction

    def add(self, obstacle: Obstacle) -> None:
        obstacle.lane = self
        self.obstacles.append(obstacle)
        self.obstacles.sort(key=lambda ob: -ob.x * self.direction)

    def remove(self, obstacle: Obstacle) -> None:
        if obstacle in self.obstacles:
            self.obstacles.remove(obstacle)

    def clear(self) -> None:
        for obstacle in self.obstacles:
            obstacle.active = False
            obstacle.lane = None
        self.obstacles = []

    def spawn_obstacle(self, x: float) -> Obstacle:
        width, height = self.config.obstacle_size(self.kind)
        obstacle = Obstacle(
            kind=self.kind,
            lane_index=self.index,
            x=x,
            y=self.y,
            speed=self.speed,
            direction=self.direction,
            width=width,
            height=height,
            field_width=self.config.width,
            offscreen_margin=self.config.offscreen_margin,
            hitbox_scale=self.config.hitbox_scale,
        )
        self.add(obstacle)
        return obstacle

    def can_spawn(self, elapsed: float, global_count: int, global_cap: int) -> bool:
        if self.active_count >= self.max_active:
            return False
        if global_count >= global_cap:
            return False
        if elapsed - self.last_spawn_at < self.next_spawn_delay:
            return False
        distance = self.trailing_distance()
        if distance is not None and distance < self.config.min_gap:
            return False
        return True

    def try_spawn(self, elapsed: float, global_count: int, global_cap: int) -> List[Obstacle]:
        if not self.can_spawn(elapsed, global_count, global_cap):
            return []

        is_train = self.rng.random() < self.config.group_chance
        count = min(
            self.config.train_size if is_train else 1,
            self.max_active - self.active_count,
            global_cap - global_count,
        )

        spawned = []
        for i in range(count):
            # Train members queue up behind the spawn edge.
            x = self.spawn_edge_x - self.direction * i * self.config.train_spacing
            spawned.append(self.spawn_obstacle(x))

        self.last_spawn_at = elapsed
        self.next_spawn_delay = self._draw_delay(spawned=count)
        logger.debug(
            "Lane %d spawned %d %s (train=%s), next in %.2fs",
            self.index,
            count,
            self.kind,
            is_train,
            self.next_spawn_delay,
        )
        return spawned

    def _draw_delay(self, spawned: int) -> float:
        low, high = self.config.spawn_interval_range
        delay = self.rng.uniform(low, high) * self.traffic_mult
        if spawned > 1:
            delay += self.config.train_cooldown
        return delay

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "y": self.y,
            "kind": self.kind,
            "direction": self.direction,
            "speed": self.speed,
            "traffic_mult": self.traffic_mult,
            "last_spawn_at": self.last_spawn_at,
            "next_spawn_delay": self.next_spawn_delay,
            "obstacles": [obstacle.to_dict() for obstacle in self.obstacles],
        }


class TrafficSimulation:
    """All lanes plus the global obstacle cap."""

    def __init__(self, config: GameConfig, rng: random.Random) -> None:
        self.config = config
        self.rng = rng
        self.global_cap = config.global_max_obstacles
        self.lanes: List[LaneTrafficController] = []
        self.obstacles: List[Obstacle] = []
        self.build_lanes()

    def build_lanes(self) -> None:
        self.clear()
        kinds = self.config.obstacle_kinds
        self.lanes = []
        for index, lane_y in enumerate(self.config.lane_ys):
            kind = kinds[index % len(kinds)]
            direction = 1 if index % 2 == 0 else -1
            # Constant per lane for the whole round.
            speed = self.rng.uniform(*self.config.speed_range(kind))
            self.lanes.append(
                LaneTrafficController(
                    index=index,
                    y=lane_y,
                    kind=kind,
                    direction=direction,
                    speed=speed,
                    traffic_mult=self.config.lane_traffic_multipliers[index],
                    config=self.config,
                    rng=self.rng,
                )
            )

    def clear(self) -> None:
        for lane in self.lanes:
            lane.clear()
        for obstacle in self.obstacles:
            obstacle.active = False
        self.obstacles = []

    @property
    def active_count(self) -> int:
        return sum(lane.active_count for lane in self.lanes)

    def active_obstacles(self) -> List[Obstacle]:
        return [obstacle for obstacle in self.obstacles if obstacle.active]

    def place(self, lane_index: int, x: float) -> Obstacle:
        obstacle = self.lanes[lane_index].spawn_obstacle(x)
        self.obstacles.append(obstacle)
        return obstacle

    def step(self, elapsed: float, dt: float) -> None:
        for obstacle in list(self.obstacles):
            obstacle.advance(dt)

        for lane in self.lanes:
            spawned = lane.try_spawn(elapsed, len(self.obstacles), self.global_cap)
            self.obstacles.extend(spawned)

        self.retire()

    def retire(self) -> None:
        self.obstacles = [obstacle for obstacle in self.obstacles if obstacle.active]
