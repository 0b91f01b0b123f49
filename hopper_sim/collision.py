from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Box:
    """Axis-aligned box given by its center and full size."""

    x: float
    y: float
    width: float
    height: float

    @property
    def half_width(self) -> float:
        return self.width / 2.0

    @property
    def half_height(self) -> float:
        return self.height / 2.0

    def scaled(self, factor: float) -> "Box":
        return Box(self.x, self.y, self.width * factor, self.height * factor)


def circle_rect_intersect(
    cx: float,
    cy: float,
    radius: float,
    rx: float,
    ry: float,
    half_w: float,
    half_h: float,
) -> bool:
    # Nearest point of the rectangle to the circle center.
    closest_x = max(rx - half_w, min(cx, rx + half_w))
    closest_y = max(ry - half_h, min(cy, ry + half_h))
    dx = cx - closest_x
    dy = cy - closest_y
    return dx * dx + dy * dy < radius * radius


def circle_circle_intersect(
    x1: float,
    y1: float,
    r1: float,
    x2: float,
    y2: float,
    r2: float,
) -> bool:
    dx = x1 - x2
    dy = y1 - y2
    reach = r1 + r2
    return dx * dx + dy * dy < reach * reach


def circle_box_intersect(cx: float, cy: float, radius: float, box: Box) -> bool:
    return circle_rect_intersect(cx, cy, radius, box.x, box.y, box.half_width, box.half_height)
