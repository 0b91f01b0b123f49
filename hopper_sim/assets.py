from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SPRITE_FILES = {
    "wolf": "wolf.png",
    "fox": "fox.png",
    "rabbit": "rabbit.png",
    "carrot": "carrot.png",
    "heart": "heart.png",
}

DEFAULT_ASSET_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets")


class AssetLoader:
    """Resolves every sprite once; a failed load resolves to ``None``."""

    def __init__(self, pygame_module: Any, asset_dir: Optional[str] = None) -> None:
        self.pygame = pygame_module
        self.asset_dir = asset_dir or DEFAULT_ASSET_DIR
        self.sprites: Dict[str, Optional[Any]] = {}
        self.resolved = 0

    @property
    def ready(self) -> bool:
        return self.resolved == len(SPRITE_FILES)

    def load(self) -> bool:
        self.sprites = {}
        self.resolved = 0
        for name, filename in SPRITE_FILES.items():
            self.sprites[name] = self._load_sprite(os.path.join(self.asset_dir, filename), name)
            self.resolved += 1
        return self.ready

    def get(self, name: str) -> Optional[Any]:
        return self.sprites.get(name)

    def _load_sprite(self, path: str, name: str) -> Optional[Any]:
        if not os.path.exists(path):
            logger.warning("Missing sprite %s; using fallback for %s", path, name)
            return None
        try:
            image = self.pygame.image.load(path)
        except (self.pygame.error, OSError) as exc:
            logger.warning("Failed to load %s (%s); using fallback for %s", path, exc, name)
            return None
        if self.pygame.display.get_surface() is not None:
            image = image.convert_alpha()
        return image
