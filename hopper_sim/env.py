from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .config import GameConfig
from .core import GameCore
from .player import InputSnapshot
from .round_state import PHASES, PHASE_GAME_OVER, PHASE_LOST, PHASE_WON


class HopperEnv:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        obs_mode: str = "state",
        action_mode: str = "discrete",
        seed: Optional[int] = None,
        auto_start: bool = True,
        asset_dir: Optional[str] = None,
    ) -> None:
        if obs_mode not in ("state", "pixels", "rgb_array"):
            raise ValueError(f"Unknown obs_mode: {obs_mode}")
        if action_mode not in ("discrete", "buttons"):
            raise ValueError(f"Unknown action_mode: {action_mode}")

        self.core = GameCore(config, seed)
        self.config = self.core.config
        self.width = self.config.width
        self.height = self.config.height
        self.fps = self.config.fps
        self.render_mode = render_mode
        self.obs_mode = obs_mode
        self.action_mode = action_mode
        self.auto_start = auto_start
        self.asset_dir = asset_dir

        self.renderer = None
        if render_mode is None:
            # No sprites to wait for.
            self.core.mark_assets_ready()
        else:
            self._ensure_renderer(render_mode)

        self.reset()

    def seed(self, seed: Optional[int]) -> None:
        self.core.reset(seed)

    def reset(self, seed: Optional[int] = None) -> Tuple[Any, Dict[str, Any]]:
        self.core.reset(seed)
        if self.auto_start:
            self.core.start()
        return self._get_observation(), self._get_info()

    def step(self, action: Any) -> Tuple[Any, float, bool, bool, Dict[str, Any]]:
        inputs = self.apply_action(action)
        prev_score = self.core.score
        prev_lives = self.core.lives

        self.core.tick(inputs)

        lives_lost = max(0, prev_lives - self.core.lives)
        reward = float(self.core.score - prev_score) - self.config.crash_penalty * lives_lost
        terminated = self.core.phase == PHASE_GAME_OVER
        truncated = False
        return self._get_observation(), reward, terminated, truncated, self._get_info()

    def render(self, mode: Optional[str] = None) -> Optional[Any]:
        if mode is None:
            mode = self.render_mode
        if mode is None:
            return None

        self._ensure_renderer(mode)
        frame = self.renderer.draw(self.core)
        if mode == "human":
            self.renderer.tick(self.fps)
            return None
        return frame

    def close(self) -> None:
        if self.renderer is not None:
            self.renderer.close()
            self.renderer = None

    def _ensure_renderer(self, mode: str) -> None:
        if self.renderer is not None and self.renderer.mode == mode:
            return
        from .render import PygameRenderer

        if self.renderer is not None:
            self.renderer.close()
        self.renderer = PygameRenderer(self.width, self.height, mode, asset_dir=self.asset_dir)
        if self.renderer.ready:
            self.core.mark_assets_ready()

    def apply_action(self, action: Any) -> InputSnapshot:
        left = right = up = down = start = restart = False
        if self.action_mode == "discrete":
            try:
                action_id = int(action)
            except (TypeError, ValueError):
                action_id = 0
            if action_id in (1, 5, 7):
                left = True
            if action_id in (2, 6, 8):
                right = True
            if action_id in (3, 5, 6):
                up = True
            if action_id in (4, 7, 8):
                down = True
        elif self.action_mode == "buttons":
            if isinstance(action, dict):
                left = bool(action.get("left", False))
                right = bool(action.get("right", False))
                up = bool(action.get("up", False))
                down = bool(action.get("down", False))
                start = bool(action.get("start", False))
                restart = bool(action.get("restart", False))
        else:
            raise ValueError(f"Unknown action_mode: {self.action_mode}")

        if left and right:
            left = right = False
        if up and down:
            up = down = False

        return InputSnapshot(
            left=left,
            right=right,
            up=up,
            down=down,
            start=start or self.auto_start,
            restart=restart,
        )

    @staticmethod
    def action_from_buttons(left: bool, right: bool, up: bool, down: bool) -> int:
        if left and right:
            left = right = False
        if up and down:
            up = down = False
        if left and up:
            return 5
        if right and up:
            return 6
        if left and down:
            return 7
        if right and down:
            return 8
        if left:
            return 1
        if right:
            return 2
        if up:
            return 3
        if down:
            return 4
        return 0

    def _get_observation(self) -> Any:
        if self.obs_mode == "state":
            return self._get_state_observation()
        return self.render(mode="rgb_array")

    def _get_state_observation(self) -> List[float]:
        core = self.core
        player = core.player
        round_state = core.round

        def clip(value: float) -> float:
            return max(-1.0, min(1.0, value))

        pause_total = 0
        pause_left = 0
        if round_state.phase == PHASE_WON:
            pause_total, pause_left = self.config.win_pause_ticks, round_state.win_timer
        elif round_state.phase == PHASE_LOST:
            pause_total, pause_left = self.config.lose_pause_ticks, round_state.lose_timer

        base = [
            clip(player.x / self.width * 2.0 - 1.0),
            clip(player.y / self.height * 2.0 - 1.0),
            clip(round_state.lives / float(self.config.starting_lives)),
        ]
        base.extend(1.0 if round_state.phase == phase else 0.0 for phase in PHASES)
        base.append(pause_left / float(pause_total) if pause_total else 0.0)
        base.append(clip((core.goal.x - player.x) / self.width))
        base.append(clip((core.goal.y - player.y) / self.height))

        top_speed = max(self.config.speed_range(kind)[1] for kind in self.config.obstacle_kinds)
        for lane in core.lanes:
            nearest = min(lane.obstacles, key=lambda ob: abs(ob.x - player.x), default=None)
            base.extend(
                [
                    clip((lane.y - player.y) / self.height),
                    float(lane.direction),
                    clip(lane.speed / top_speed),
                    1.0 if nearest is not None else 0.0,
                    clip((nearest.x - player.x) / self.width) if nearest is not None else 0.0,
                ]
            )
        return base

    @property
    def state_size(self) -> int:
        base_count = 3 + len(PHASES) + 3
        per_lane = 5
        return base_count + len(self.config.lane_ys) * per_lane

    def _get_info(self) -> Dict[str, Any]:
        round_state = self.core.round
        return {
            "score": round_state.score,
            "lives": round_state.lives,
            "game_mode": round_state.phase,
            "elapsed": round_state.elapsed,
            "obstacles": len(self.core.obstacles),
            "last_hit_kind": round_state.last_hit_kind,
            "message": self.current_message(),
        }

    def current_message(self) -> Optional[str]:
        round_state = self.core.round
        if round_state.phase == PHASE_GAME_OVER:
            return "GAME OVER"
        if round_state.phase == PHASE_WON:
            return "YOU GOT THE CARROT!"
        if round_state.phase == PHASE_LOST and round_state.last_hit_kind:
            return f"CAUGHT BY A {round_state.last_hit_kind.upper()}!"
        return None
