from __future__ import annotations

from typing import Any, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .config import GameConfig
from .env import HopperEnv


class HopperGymEnv(gym.Env):
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        obs_mode: str = "state",
        action_mode: str = "discrete",
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        asset_dir: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.env = HopperEnv(
            config=config,
            render_mode=render_mode,
            obs_mode=obs_mode,
            action_mode=action_mode,
            seed=seed,
            auto_start=True,
            asset_dir=asset_dir,
        )
        self.render_mode = render_mode
        self.obs_mode = obs_mode
        self.action_mode = action_mode

        self.action_space = self._make_action_space(action_mode)
        self.observation_space = self._make_observation_space(obs_mode)
        self.metadata = dict(self.metadata, render_fps=self.env.fps)

    def _make_action_space(self, action_mode: str):
        if action_mode == "discrete":
            return spaces.Discrete(9)
        if action_mode == "buttons":
            return spaces.MultiBinary(4)
        raise ValueError(f"Unknown action_mode: {action_mode}")

    def _make_observation_space(self, obs_mode: str):
        if obs_mode == "state":
            size = self.env.state_size
            return spaces.Box(low=-1.0, high=1.0, shape=(size,), dtype=np.float32)
        if obs_mode in ("pixels", "rgb_array"):
            return spaces.Box(
                low=0,
                high=255,
                shape=(self.env.height, self.env.width, 3),
                dtype=np.uint8,
            )
        raise ValueError(f"Unknown obs_mode: {obs_mode}")

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None):
        del options
        super().reset(seed=seed)
        # Fresh traffic every episode, reproducible from the gym seed.
        round_seed = int(self.np_random.integers(0, 2**31 - 1))
        obs, info = self.env.reset(seed=round_seed)
        return self._format_obs(obs), info

    def step(self, action: Any) -> Tuple[Any, float, bool, bool, dict]:
        if self.action_mode == "buttons" and not isinstance(action, dict):
            action = self._buttons_from_array(action)
        obs, reward, terminated, truncated, info = self.env.step(action)
        return self._format_obs(obs), float(reward), bool(terminated), bool(truncated), info

    def render(self):
        return self.env.render(mode=self.render_mode)

    def close(self) -> None:
        self.env.close()

    def _format_obs(self, obs: Any):
        if self.obs_mode == "state":
            return np.asarray(obs, dtype=np.float32)
        if obs is None:
            return np.zeros(self.observation_space.shape, dtype=np.uint8)
        return obs.astype(np.uint8, copy=False)

    @staticmethod
    def _buttons_from_array(action: Any) -> dict:
        try:
            left, right, up, down = action
        except (TypeError, ValueError):
            left = right = up = down = 0
        return {
            "left": bool(left),
            "right": bool(right),
            "up": bool(up),
            "down": bool(down),
        }
