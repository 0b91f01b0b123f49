from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from .collision import circle_box_intersect
from .config import GameConfig
from .obstacle import Obstacle
from .player import Goal, InputSnapshot, Player
from .round_state import RoundState
from .traffic import LaneTrafficController, TrafficSimulation

logger = logging.getLogger(__name__)


class GameCore:
    """One round of the crossing game: traffic, player, goal and round state.

    The core does nothing until ``mark_assets_ready`` has been called once.
    After that, ``tick`` is called once per frame with the current input
    snapshot.
    """

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None) -> None:
        self.config = (config or GameConfig()).validate()
        self.dt = self.config.dt

        self.seed_rng = random.Random(seed)
        self.round_seed = seed if seed is not None else self.seed_rng.randrange(2**32)
        self.rng = random.Random(self.round_seed)

        self.assets_ready = False
        self.tick_count = 0

        self.player = Player(self.config)
        self.goal = Goal(self.config)
        self.round = RoundState(self.config)
        self.traffic = TrafficSimulation(self.config, self.rng)

        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.round_seed = seed
        self.rng.seed(self.round_seed)
        self.tick_count = 0
        self.round.reset()
        self.player.reset()
        self.goal.reset()
        self.traffic.build_lanes()

    def restart(self) -> None:
        self.round_seed = self.seed_rng.randrange(2**32)
        logger.info("Restarting round with seed %d", self.round_seed)
        self.reset()

    def start(self) -> bool:
        return self.round.start()

    def mark_assets_ready(self) -> None:
        if not self.assets_ready:
            logger.debug("Assets ready, core unblocked")
        self.assets_ready = True

    @property
    def phase(self) -> str:
        return self.round.phase

    @property
    def lives(self) -> int:
        return self.round.lives

    @property
    def score(self) -> int:
        return self.round.score

    @property
    def lanes(self) -> List[LaneTrafficController]:
        return self.traffic.lanes

    @property
    def obstacles(self) -> List[Obstacle]:
        return self.traffic.active_obstacles()

    def tick(self, inputs: Optional[InputSnapshot] = None) -> None:
        if not self.assets_ready:
            return
        if inputs is None:
            inputs = InputSnapshot()

        self.goal.update_pulse(self.dt)

        if inputs.restart and self.round.game_over:
            self.restart()
            return
        if inputs.start:
            self.start()

        if not self.round.traffic_running:
            return
        self.tick_count += 1

        if self.round.accepts_input:
            self.player.update(inputs, self.dt)
            goal_hit, hit_kinds = self.check_collisions()
            self.round.resolve(goal_hit, hit_kinds)
            if not self.round.accepts_input:
                self.player.moving = False
        else:
            self.player.moving = False
            if self.round.tick_pause():
                self.player.reset()

        if self.round.traffic_running:
            self.round.advance_time(self.dt)
            self.traffic.step(self.round.elapsed, self.dt)

    def check_collisions(self) -> Tuple[bool, List[str]]:
        px, py, radius = self.player.x, self.player.y, self.player.radius
        goal_hit = circle_box_intersect(px, py, radius, self.goal.box())
        hit_kinds = [
            obstacle.kind
            for obstacle in self.traffic.active_obstacles()
            if circle_box_intersect(px, py, radius, obstacle.hitbox())
        ]
        return goal_hit, hit_kinds

    def snapshot(self) -> Dict[str, Any]:
        return {
            "round_seed": self.round_seed,
            "tick_count": self.tick_count,
            "assets_ready": self.assets_ready,
            "round": self.round.to_dict(),
            "player": self.player.to_dict(),
            "goal": self.goal.to_dict(),
            "lanes": [lane.to_dict() for lane in self.traffic.lanes],
            "obstacles": [obstacle.to_dict() for obstacle in self.traffic.obstacles],
        }
