from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .collision import Box
from .config import GameConfig


@dataclass(frozen=True)
class InputSnapshot:
    """Keys held this tick plus the discrete start/restart signals."""

    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    start: bool = False
    restart: bool = False


class Player:
    def __init__(self, config: GameConfig) -> None:
        self.config = config
        self.radius = config.player_radius
        self.speed = config.player_speed
        self.size = config.player_size
        self.x = 0.0
        self.y = 0.0
        self.moving = False
        self.reset()

    def reset(self) -> None:
        self.x, self.y = self.config.player_start
        self.moving = False
        self.clamp_to_field()

    def update(self, inputs: InputSnapshot, dt: float) -> None:
        step = self.speed * dt
        self.moving = False
        if inputs.up:
            self.y -= step
            self.moving = True
        if inputs.down:
            self.y += step
            self.moving = True
        if inputs.left:
            self.x -= step
            self.moving = True
        if inputs.right:
            self.x += step
            self.moving = True
        self.clamp_to_field()

    def clamp_to_field(self) -> None:
        r = self.radius
        self.x = min(max(self.x, r), self.config.width - r)
        self.y = min(max(self.y, r), self.config.height - r)

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "radius": self.radius, "size": self.size, "moving": self.moving}


class Goal:
    def __init__(self, config: GameConfig) -> None:
        self.config = config
        self.x, self.y = config.goal_position
        self.width, self.height = config.goal_size
        self.pulse_scale = 1.0
        self.pulse_direction = 1

    def reset(self) -> None:
        self.pulse_scale = 1.0
        self.pulse_direction = 1

    def box(self) -> Box:
        # Collision ignores the pulse.
        return Box(self.x, self.y, self.width, self.height)

    def update_pulse(self, dt: float) -> None:
        low, high = self.config.goal_pulse_range
        self.pulse_scale += self.config.goal_pulse_rate * dt * self.pulse_direction
        if self.pulse_scale >= high:
            self.pulse_scale = high
            self.pulse_direction = -1
        elif self.pulse_scale <= low:
            self.pulse_scale = low
            self.pulse_direction = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "pulse_scale": self.pulse_scale,
        }
