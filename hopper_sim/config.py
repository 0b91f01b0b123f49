from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Tuple

import yaml


@dataclass
class GameConfig:
    """Tunables for one round of the crossing game."""

    # Field
    width: int = 800
    height: int = 600
    fps: int = 60

    # Lanes, top to bottom
    lane_ys: Tuple[float, ...] = (120.0, 180.0, 240.0, 300.0, 360.0, 420.0)
    # >1 = quieter lane, spawns less often
    lane_traffic_multipliers: Tuple[float, ...] = (1.6, 1.0, 1.4, 1.0, 1.6, 1.2)

    # Obstacles
    obstacle_kinds: Tuple[str, ...] = ("wolf", "fox")
    wolf_speed_range: Tuple[float, float] = (120.0, 210.0)
    fox_speed_range: Tuple[float, float] = (150.0, 240.0)
    wolf_size: float = 75.0
    fox_size: float = 70.0
    obstacle_aspect: float = 0.8
    hitbox_scale: float = 0.8
    offscreen_margin: float = 100.0

    # Spawning
    spawn_interval_range: Tuple[float, float] = (1.7, 2.6)
    train_size: int = 3
    train_spacing: float = 100.0
    train_cooldown: float = 0.5
    min_gap: float = 220.0
    group_chance: float = 0.25
    max_active_per_lane: int = 2
    global_max_obstacles: int = 10

    # Player
    player_size: float = 64.0
    player_radius: float = 25.6
    player_speed: float = 300.0
    player_start: Tuple[float, float] = (400.0, 520.0)

    # Goal
    goal_position: Tuple[float, float] = (400.0, 80.0)
    goal_size: Tuple[float, float] = (30.0, 40.0)
    goal_pulse_range: Tuple[float, float] = (0.9, 1.1)
    goal_pulse_rate: float = 0.3

    # Round
    starting_lives: int = 3
    goal_bonus: int = 100
    win_pause_time: float = 2.0
    lose_pause_time: float = 1.5
    one_hit_per_tick: bool = False

    # Environment reward shaping
    crash_penalty: float = 50.0

    @property
    def dt(self) -> float:
        return 1.0 / float(self.fps)

    @property
    def win_pause_ticks(self) -> int:
        return max(1, int(round(self.win_pause_time * self.fps)))

    @property
    def lose_pause_ticks(self) -> int:
        return max(1, int(round(self.lose_pause_time * self.fps)))

    def speed_range(self, kind: str) -> Tuple[float, float]:
        if kind == "wolf":
            return self.wolf_speed_range
        if kind == "fox":
            return self.fox_speed_range
        raise ValueError(f"Unknown obstacle kind: {kind}")

    def obstacle_size(self, kind: str) -> Tuple[float, float]:
        if kind == "wolf":
            side = self.wolf_size
        elif kind == "fox":
            side = self.fox_size
        else:
            raise ValueError(f"Unknown obstacle kind: {kind}")
        return side, side * self.obstacle_aspect

    def validate(self) -> "GameConfig":
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Field dimensions must be positive")
        if self.fps <= 0:
            raise ValueError("fps must be positive")
        if not self.lane_ys:
            raise ValueError("At least one lane is required")
        if len(self.lane_traffic_multipliers) != len(self.lane_ys):
            raise ValueError(
                f"Expected {len(self.lane_ys)} lane multipliers, got {len(self.lane_traffic_multipliers)}"
            )
        if any(mult <= 0 for mult in self.lane_traffic_multipliers):
            raise ValueError("Lane traffic multipliers must be positive")
        if self.max_active_per_lane <= 0 or self.global_max_obstacles <= 0:
            raise ValueError("Obstacle caps must be positive")
        if self.train_size < 1:
            raise ValueError("train_size must be at least 1")
        for name in ("wolf_speed_range", "fox_speed_range", "spawn_interval_range", "goal_pulse_range"):
            low, high = getattr(self, name)
            if low > high:
                raise ValueError(f"{name} is inverted: {low} > {high}")
        widest = max(self.obstacle_size(kind)[0] for kind in self.obstacle_kinds)
        if self.train_size > 1 and self.train_spacing < widest:
            raise ValueError("train_spacing must be at least the widest obstacle")
        if self.starting_lives < 1:
            raise ValueError("starting_lives must be at least 1")
        if self.player_radius <= 0 or self.player_radius * 2 > min(self.width, self.height):
            raise ValueError("player_radius does not fit the field")
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameConfig":
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in (data or {}).items():
            if key not in known:
                continue
            if isinstance(value, list):
                value = tuple(value)
            values[key] = value
        return cls(**values).validate()

    @classmethod
    def from_yaml(cls, path: str) -> "GameConfig":
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})
