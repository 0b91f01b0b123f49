from __future__ import annotations

import math
import random
from typing import Any, Optional

from .assets import AssetLoader

LANE_COLORS = ((168, 230, 207), (143, 188, 143))
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


class PygameRenderer:
    def __init__(self, width: int, height: int, mode: str, asset_dir: Optional[str] = None) -> None:
        try:
            import pygame
        except ImportError as exc:
            raise RuntimeError("pygame is required for rendering") from exc

        if mode not in ("human", "rgb_array"):
            raise ValueError(f"Unknown render mode: {mode}")

        self.pygame = pygame
        self.width = width
        self.height = height
        self.mode = mode

        pygame.init()
        pygame.font.init()

        self.screen = None
        if mode == "human":
            self.screen = pygame.display.set_mode((width, height))
            pygame.display.set_caption("Hopper Simulation")
            self.surface = self.screen
        else:
            self.surface = pygame.Surface((width, height))

        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 24)
        self.score_font = pygame.font.Font(None, 36)
        self.big_font = pygame.font.Font(None, 56)

        self.assets = AssetLoader(pygame, asset_dir)
        self.assets.load()
        self.grass = self._make_grass()
        self.frame = 0

    @property
    def ready(self) -> bool:
        return self.assets.ready

    def close(self) -> None:
        self.pygame.quit()

    def tick(self, fps: int) -> None:
        if self.mode == "human":
            self.clock.tick(fps)

    def draw(self, core) -> Optional[Any]:
        self.frame += 1
        state = core.snapshot()
        surface = self.surface

        surface.blit(self.grass, (0, 0))
        self._draw_lanes(surface, core)
        self._draw_goal(surface, state["goal"])
        for obstacle in state["obstacles"]:
            self._draw_obstacle(surface, obstacle)
        self._draw_player(surface, state["player"], state["round"]["phase"])
        self._draw_hud(surface, state["round"])
        self._draw_message(surface, state["round"])

        if self.mode == "human":
            self.pygame.display.flip()
            return None
        return self._get_rgb_array()

    def _make_grass(self):
        pg = self.pygame
        grass = pg.Surface((self.width, self.height))
        grass.fill((144, 238, 144))
        rng = random.Random(0)
        for _ in range(100):
            x = rng.uniform(0, self.width)
            y = rng.uniform(0, self.height)
            pg.draw.rect(grass, (34, 139, 34), (int(x), int(y), 1, int(rng.uniform(1, 4))))
        return grass

    def _draw_lanes(self, surface, core) -> None:
        pg = self.pygame
        band = core.config.fox_size
        for lane in core.lanes:
            color = LANE_COLORS[lane.index % 2]
            pg.draw.rect(surface, color, self._rect_from_center(self.width / 2.0, lane.y, self.width, band))
            edge = int(lane.y + band / 2.0)
            pg.draw.line(surface, (255, 255, 255), (0, edge), (self.width, edge), 2)

    def _draw_shadow(self, surface, x: float, bottom: float, width: float) -> None:
        pg = self.pygame
        shadow = pg.Surface((int(width), 8), pg.SRCALPHA)
        pg.draw.ellipse(shadow, (0, 0, 0, 77), shadow.get_rect())
        surface.blit(shadow, (int(x - width / 2.0 + 2), int(bottom)))

    def _draw_goal(self, surface, goal) -> None:
        pg = self.pygame
        scale = goal["pulse_scale"]
        w = goal["width"] * scale
        h = goal["height"] * scale
        x, y = goal["x"], goal["y"]
        self._draw_shadow(surface, x, y + goal["height"] / 2.0, goal["width"])

        sprite = self.assets.get("carrot")
        if sprite is not None:
            image = pg.transform.scale(sprite, (max(1, int(w)), max(1, int(h))))
            surface.blit(image, self._rect_from_center(x, y, w, h))
            return

        body = [(x - w / 2.0, y - h / 2.0), (x + w / 2.0, y - h / 2.0), (x, y + h / 2.0)]
        pg.draw.polygon(surface, (255, 140, 0), body)
        for offset in (-6, 0, 6):
            pg.draw.line(
                surface,
                (34, 139, 34),
                (x + offset, y - h / 2.0),
                (x + offset * 1.5, y - h / 2.0 - 12 * scale),
                3,
            )

    def _draw_obstacle(self, surface, obstacle) -> None:
        pg = self.pygame
        x, y = obstacle["x"], obstacle["y"]
        w, h = obstacle["width"], obstacle["height"]
        self._draw_shadow(surface, x, y + h / 2.0, w)

        sprite = self.assets.get(obstacle["kind"])
        if sprite is not None:
            image = pg.transform.scale(sprite, (int(w), int(h)))
            if obstacle["direction"] < 0:
                image = pg.transform.flip(image, True, False)
            surface.blit(image, self._rect_from_center(x, y, w, h))
            return

        rect = self._rect_from_center(x, y, w, h)
        if obstacle["kind"] == "wolf":
            pg.draw.rect(surface, (139, 0, 0), rect)
            top = y - h / 2.0
            for side in (-1, 1):
                ear = [
                    (x + side * w / 3.0, top),
                    (x + side * w / 4.0, top - 15),
                    (x + side * w / 6.0, top),
                ]
                pg.draw.polygon(surface, (102, 0, 0), ear)
            eye_dx, nose = 8, (255, 105, 180)
        else:
            pg.draw.rect(surface, (160, 82, 45), rect)
            tail_x = x - obstacle["direction"] * (w / 2.0 + 8)
            pg.draw.circle(surface, (139, 69, 19), (int(tail_x), int(y)), 12)
            for side in (-1, 1):
                pg.draw.circle(surface, (139, 69, 19), (int(x + side * w / 3.0), int(y - h / 2.0 - 5)), 8)
            eye_dx, nose = 6, (255, 105, 180)
        pg.draw.circle(surface, BLACK, (int(x - eye_dx), int(y - 5)), 3)
        pg.draw.circle(surface, BLACK, (int(x + eye_dx), int(y - 5)), 3)
        pg.draw.circle(surface, nose, (int(x), int(y + 2)), 2)

    def _draw_player(self, surface, player, phase: str) -> None:
        pg = self.pygame
        w = player["size"]
        h = w * 0.8
        hop = 0.0
        if phase == "playing" and player["moving"]:
            hop = math.sin(self.frame * 0.3) * 3.0
        x, y = player["x"], player["y"] + hop
        self._draw_shadow(surface, x, player["y"] + h / 2.0, w)

        sprite = self.assets.get("rabbit")
        if sprite is not None:
            image = pg.transform.scale(sprite, (int(w), int(h)))
            surface.blit(image, self._rect_from_center(x, y, w, h))
            return

        pg.draw.ellipse(surface, (139, 69, 19), self._rect_from_center(x, y, w, h))
        for side in (-1, 1):
            ear = self._rect_from_center(x + side * w / 5.0, y - h / 2.0 - 8, 8, 20)
            pg.draw.ellipse(surface, (139, 69, 19), ear)
        pg.draw.circle(surface, BLACK, (int(x - 8), int(y - 5)), 3)
        pg.draw.circle(surface, BLACK, (int(x + 8), int(y - 5)), 3)
        pg.draw.circle(surface, (255, 105, 180), (int(x), int(y + 3)), 3)

    def _draw_hud(self, surface, round_state) -> None:
        pg = self.pygame
        heart = self.assets.get("heart")
        for i in range(round_state["lives"]):
            if heart is not None:
                surface.blit(pg.transform.scale(heart, (30, 30)), (20 + i * 35, 20))
            else:
                pg.draw.circle(surface, (220, 20, 60), (35 + i * 35, 35), 12)

        score_surf = self.score_font.render(f"Score: {round_state['score']}", True, WHITE)
        outline = self.score_font.render(f"Score: {round_state['score']}", True, BLACK)
        x = self.width - 20 - score_surf.get_width()
        surface.blit(outline, (x + 2, 22))
        surface.blit(score_surf, (x, 20))

    def _draw_message(self, surface, round_state) -> None:
        phase = round_state["phase"]
        if phase == "intro":
            title, detail = "Hopper", "Press ENTER or SPACE to start"
        elif phase == "won":
            title, detail = "You got the carrot!", f"Score: {round_state['score']}"
        elif phase == "lost":
            kind = (round_state["last_hit_kind"] or "obstacle").capitalize()
            title, detail = f"Caught by a {kind}!", f"{round_state['lives']} lives left"
        elif phase == "game_over":
            title, detail = "GAME OVER", f"Final Score: {round_state['score']}  -  ENTER to restart"
        else:
            return

        pg = self.pygame
        overlay = pg.Surface((self.width, self.height), pg.SRCALPHA)
        overlay.fill((0, 0, 0, 120))
        surface.blit(overlay, (0, 0))

        title_surf = self.big_font.render(title, True, WHITE)
        detail_surf = self.font.render(detail, True, WHITE)
        surface.blit(
            title_surf,
            ((self.width - title_surf.get_width()) / 2.0, self.height / 2.0 - title_surf.get_height()),
        )
        surface.blit(detail_surf, ((self.width - detail_surf.get_width()) / 2.0, self.height / 2.0 + 16))

    def _get_rgb_array(self):
        try:
            import numpy as np
        except ImportError as exc:
            raise RuntimeError("rgb_array mode requires numpy") from exc

        arr = self.pygame.surfarray.array3d(self.surface)
        return np.transpose(arr, (1, 0, 2))

    def _rect_from_center(self, x: float, y: float, w: float, h: float):
        return self.pygame.Rect(int(x - w / 2.0), int(y - h / 2.0), int(w), int(h))
