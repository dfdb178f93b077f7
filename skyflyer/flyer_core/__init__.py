"""
Flyer Core - The game simulation.

This module provides the per-frame simulation, a Gymnasium environment
wrapper and all supporting systems (spawning, motion, collision, scoring).

Main exports:
- CoreGame: Frame-driven game simulation
- SkyFlyerEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
- JsonHighScoreStore: File-backed best-score persistence
"""

from skyflyer.flyer_core.config_loader import GameConfig, load_config
from skyflyer.flyer_core.entities import Coin, CoinTier, Obstacle, PlayerPosition, Rect
from skyflyer.flyer_core.state import (
    GameState,
    HighScoreStore,
    JsonHighScoreStore,
    MemoryHighScoreStore,
)
from skyflyer.flyer_core.game import CoreGame, FrameResult
from skyflyer.flyer_core.scoring import FeedbackBand, GameOverResult
from skyflyer.flyer_core.env_gym import SkyFlyerEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Coin",
    "CoinTier",
    "Obstacle",
    "PlayerPosition",
    "Rect",
    "GameState",
    "HighScoreStore",
    "JsonHighScoreStore",
    "MemoryHighScoreStore",
    "CoreGame",
    "FrameResult",
    "FeedbackBand",
    "GameOverResult",
    "SkyFlyerEnv",
]
