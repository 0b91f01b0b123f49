from .config import GameConfig
from .core import GameCore
from .env import HopperEnv
from .gym_env import HopperGymEnv
from .player import InputSnapshot

__all__ = ["GameConfig", "GameCore", "HopperEnv", "HopperGymEnv", "InputSnapshot"]
