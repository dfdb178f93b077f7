"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
import numpy as np

from skyflyer.flyer_core.config_loader import GameConfig, get_config
from skyflyer.flyer_core.state import GameState


@dataclass
class GameSnapshot:
    """
    Game state snapshot.

    Entity arrays are fixed-size with masking for variable entity counts.
    Entities beyond the array size are dropped, oldest first kept.
    """
    # Core state
    score: int
    coin_count: int
    high_score: int
    running: bool
    frame: int

    # Arena (for normalization)
    arena_width: float
    arena_height: float

    # Player
    player: np.ndarray                # (4,) float32 x, y, w, h
    hitbox: np.ndarray                # (4,) float32 x, y, w, h

    # Obstacles (fixed size, padded)
    obstacle_x: np.ndarray            # (MAX_OBS,) float32
    obstacle_y: np.ndarray            # (MAX_OBS,) float32
    obstacle_mask: np.ndarray         # (MAX_OBS,) bool

    # Coins (fixed size, padded)
    coin_x: np.ndarray                # (MAX_COINS,) float32
    coin_y: np.ndarray                # (MAX_COINS,) float32
    coin_multiplier: np.ndarray       # (MAX_COINS,) int8, 0 when empty
    coin_mask: np.ndarray             # (MAX_COINS,) bool

    @property
    def obstacle_count(self) -> int:
        return int(self.obstacle_mask.sum())

    @property
    def coin_entity_count(self) -> int:
        return int(self.coin_mask.sum())

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        obs = {
            "score": np.array(self.score, dtype=np.int64),
            "coin_count": np.array(self.coin_count, dtype=np.int64),
            "player": self.player.copy(),
            "hitbox": self.hitbox.copy(),
            "obstacle_x": self.obstacle_x.copy(),
            "obstacle_y": self.obstacle_y.copy(),
            "obstacle_mask": self.obstacle_mask.astype(np.int8),
            "coin_x": self.coin_x.copy(),
            "coin_y": self.coin_y.copy(),
            "coin_multiplier": self.coin_multiplier.copy(),
            "coin_mask": self.coin_mask.astype(np.int8),
        }
        return obs


class SnapshotBuilder:
    """Builds game state snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_obstacles = config.observation.max_obstacles
        self._max_coins = config.observation.max_coins

        # Pre-allocate arrays
        self._obstacle_x = np.zeros(self._max_obstacles, dtype=np.float32)
        self._obstacle_y = np.zeros(self._max_obstacles, dtype=np.float32)
        self._obstacle_mask = np.zeros(self._max_obstacles, dtype=bool)
        self._coin_x = np.zeros(self._max_coins, dtype=np.float32)
        self._coin_y = np.zeros(self._max_coins, dtype=np.float32)
        self._coin_multiplier = np.zeros(self._max_coins, dtype=np.int8)
        self._coin_mask = np.zeros(self._max_coins, dtype=bool)

    def build(self, state: GameState) -> GameSnapshot:
        """Build a snapshot from current game state."""
        # Reset arrays
        self._obstacle_x.fill(0)
        self._obstacle_y.fill(0)
        self._obstacle_mask.fill(False)
        self._coin_x.fill(0)
        self._coin_y.fill(0)
        self._coin_multiplier.fill(0)
        self._coin_mask.fill(False)

        for i, obstacle in enumerate(state.obstacles[:self._max_obstacles]):
            self._obstacle_x[i] = obstacle.x
            self._obstacle_y[i] = obstacle.y
            self._obstacle_mask[i] = True

        for i, coin in enumerate(state.coins[:self._max_coins]):
            self._coin_x[i] = coin.x
            self._coin_y[i] = coin.y
            self._coin_multiplier[i] = coin.multiplier
            self._coin_mask[i] = True

        return GameSnapshot(
            score=state.displayed_score,
            coin_count=state.coin_count,
            high_score=state.high_score,
            running=state.running,
            frame=state.frame,
            arena_width=float(self._config.arena.width),
            arena_height=float(self._config.arena.height),
            player=np.array(state.player.rect.as_tuple(), dtype=np.float32),
            hitbox=np.array(state.player.hitbox.as_tuple(), dtype=np.float32),
            obstacle_x=self._obstacle_x.copy(),
            obstacle_y=self._obstacle_y.copy(),
            obstacle_mask=self._obstacle_mask.copy(),
            coin_x=self._coin_x.copy(),
            coin_y=self._coin_y.copy(),
            coin_multiplier=self._coin_multiplier.copy(),
            coin_mask=self._coin_mask.copy()
        )
