from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from .config import GameConfig
from .env import HopperEnv


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Hopper with the keyboard")
    parser.add_argument("--config", type=str, default="", help="Path to config YAML file")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--assets", type=str, default=None, help="Directory holding the sprite PNGs")
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = GameConfig.from_yaml(args.config) if args.config else GameConfig()

    try:
        import pygame
    except ImportError as exc:
        raise RuntimeError("pygame is required to run the human demo") from exc

    env = HopperEnv(
        config=config,
        render_mode="human",
        action_mode="buttons",
        seed=args.seed,
        auto_start=False,
        asset_dir=args.assets,
    )
    obs, info = env.reset()
    env.render()

    best_score = 0
    running = True
    while running:
        start = restart = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_RETURN, pygame.K_SPACE):
                    start = True
                if event.key in (pygame.K_RETURN, pygame.K_r):
                    restart = True

        keys = pygame.key.get_pressed()
        action = {
            "left": keys[pygame.K_LEFT] or keys[pygame.K_a],
            "right": keys[pygame.K_RIGHT] or keys[pygame.K_d],
            "up": keys[pygame.K_UP] or keys[pygame.K_w],
            "down": keys[pygame.K_DOWN] or keys[pygame.K_s],
            # A restart lands in the intro; starting needs a fresh key press.
            "start": start and info.get("game_mode") != "game_over",
            "restart": restart,
        }
        obs, reward, terminated, truncated, info = env.step(action)
        best_score = max(best_score, info["score"])
        env.render()

    env.close()
    print(f"Best score this session: {best_score}")


if __name__ == "__main__":
    main()
