from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

from .collision import Box

if TYPE_CHECKING:
    from .traffic import LaneTrafficController


@dataclass(eq=False)
class Obstacle:
    kind: str
    lane_index: int
    x: float
    y: float
    speed: float
    direction: int
    width: float
    height: float
    field_width: float
    offscreen_margin: float
    hitbox_scale: float = 0.8
    active: bool = True
    lane: Optional["LaneTrafficController"] = field(default=None, repr=False, compare=False)

    def advance(self, dt: float) -> None:
        if not self.active:
            return
        self.x += self.speed * self.direction * dt
        if self.direction > 0 and self.x > self.field_width + self.offscreen_margin:
            self.deactivate()
        elif self.direction < 0 and self.x < -self.offscreen_margin:
            self.deactivate()

    def deactivate(self) -> None:
        if not self.active:
            return
        self.active = False
        if self.lane is not None:
            self.lane.remove(self)

    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)

    def hitbox(self) -> Box:
        return self.box().scaled(self.hitbox_scale)

    def to_dict(self) -> Dict[str, Any]:
        hitbox = self.hitbox()
        return {
            "kind": self.kind,
            "lane": self.lane_index,
            "x": self.x,
            "y": self.y,
            "direction": self.direction,
            "width": self.width,
            "height": self.height,
            "hitbox": (hitbox.x, hitbox.y, hitbox.width, hitbox.height),
        }
