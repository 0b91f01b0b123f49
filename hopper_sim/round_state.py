from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from .config import GameConfig

logger = logging.getLogger(__name__)

PHASE_INTRO = "intro"
PHASE_PLAYING = "playing"
PHASE_WON = "won"
PHASE_LOST = "lost"
PHASE_GAME_OVER = "game_over"

PHASES = (PHASE_INTRO, PHASE_PLAYING, PHASE_WON, PHASE_LOST, PHASE_GAME_OVER)


class RoundState:
    """Lives, score and phase of one round.

    Nothing outside this class writes ``lives``, ``score`` or ``phase``; the
    core feeds it collision outcomes and ticks its timers.
    """

    def __init__(self, config: GameConfig) -> None:
        self.config = config
        self.phase = PHASE_INTRO
        self.lives = config.starting_lives
        self.score = 0
        self.elapsed = 0.0
        self.win_timer = 0
        self.lose_timer = 0
        self.last_hit_kind: Optional[str] = None
        self.reset()

    def reset(self) -> None:
        self.phase = PHASE_INTRO
        self.lives = max(0, int(self.config.starting_lives))
        self.score = 0
        self.elapsed = 0.0
        self.win_timer = 0
        self.lose_timer = 0
        self.last_hit_kind = None

    @property
    def has_won(self) -> bool:
        return self.phase == PHASE_WON

    @property
    def has_lost(self) -> bool:
        return self.phase == PHASE_LOST

    @property
    def game_over(self) -> bool:
        return self.phase == PHASE_GAME_OVER

    @property
    def paused(self) -> bool:
        return self.phase in (PHASE_WON, PHASE_LOST)

    @property
    def accepts_input(self) -> bool:
        return self.phase == PHASE_PLAYING

    @property
    def traffic_running(self) -> bool:
        # Pauses still count as playing for traffic and time.
        return self.phase in (PHASE_PLAYING, PHASE_WON, PHASE_LOST)

    def start(self) -> bool:
        if self.phase != PHASE_INTRO:
            return False
        self._set_phase(PHASE_PLAYING)
        return True

    def advance_time(self, dt: float) -> None:
        if self.traffic_running:
            self.elapsed += dt

    def resolve(self, goal_hit: bool, hit_kinds: Sequence[str]) -> int:
        """Apply this tick's collisions. Returns the number of lives lost."""
        if self.phase != PHASE_PLAYING:
            return 0

        if goal_hit:
            self.score = max(0, self.score + int(self.config.goal_bonus))
            logger.info("Goal reached, score %d", self.score)

        if self.config.one_hit_per_tick:
            hit_kinds = list(hit_kinds)[:1]

        lives_lost = 0
        for kind in hit_kinds:
            if self.lives <= 0:
                break
            self.lives = max(0, self.lives - 1)
            self.last_hit_kind = kind
            lives_lost += 1
            logger.info("Caught by %s, lives left %d", kind, self.lives)

        if lives_lost:
            if self.lives <= 0:
                self._set_phase(PHASE_GAME_OVER)
            else:
                self.lose_timer = self.config.lose_pause_ticks
                self._set_phase(PHASE_LOST)
        elif goal_hit:
            self.win_timer = self.config.win_pause_ticks
            self._set_phase(PHASE_WON)
        return lives_lost

    def tick_pause(self) -> bool:
        """Count down an active pause. Returns True on the tick it ends."""
        if self.phase == PHASE_WON:
            self.win_timer = max(0, self.win_timer - 1)
            if self.win_timer == 0:
                self._set_phase(PHASE_PLAYING)
                return True
        elif self.phase == PHASE_LOST:
            self.lose_timer = max(0, self.lose_timer - 1)
            if self.lose_timer == 0:
                self._set_phase(PHASE_PLAYING)
                return True
        return False

    def _set_phase(self, phase: str) -> None:
        if phase not in PHASES:
            raise ValueError(f"Unknown phase: {phase}")
        if phase != self.phase:
            logger.info("Phase %s -> %s", self.phase, phase)
        self.phase = phase

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase,
            "lives": self.lives,
            "score": self.score,
            "elapsed": self.elapsed,
            "win_timer": self.win_timer,
            "lose_timer": self.lose_timer,
            "last_hit_kind": self.last_hit_kind,
        }
