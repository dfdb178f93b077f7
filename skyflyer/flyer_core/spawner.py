"""
Spawner
=======

Time-gated creation of obstacles and coins just above the arena.
"""

from __future__ import annotations

import random
from typing import Optional

from skyflyer.flyer_core.config_loader import GameConfig, get_config
from skyflyer.flyer_core.entities import Coin, CoinTier, Obstacle
from skyflyer.flyer_core.state import GameState


class Spawner:
    """
    Spawns an entity whenever more than its interval has elapsed since the
    previous spawn of that kind. Horizontal positions are uniform over the
    arena; coin tiers are drawn from the configured probability bands.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)

        self._arena_width = config.arena.width
        self._obstacle = config.obstacle
        self._coin = config.coin
        self._obstacle_interval = config.spawn.obstacle_interval_ms
        self._coin_interval = config.spawn.coin_interval_ms
        self._tier_bands = [
            (band.below, CoinTier.from_name(band.name)) for band in config.coin_tiers
        ]

    def choose_tier(self, r: Optional[float] = None) -> CoinTier:
        """
        Map a uniform draw in [0, 1) to a coin tier.

        Args:
            r: Draw to use. A fresh one is taken if None.
        """
        if r is None:
            r = self._rng.random()
        for below, tier in self._tier_bands:
            if r < below:
                return tier
        return self._tier_bands[-1][1]

    def try_spawn_obstacle(self, state: GameState, now: float) -> Optional[Obstacle]:
        """Spawn an obstacle if the obstacle interval has elapsed."""
        if not state.running:
            return None
        if now - state.last_obstacle_spawn <= self._obstacle_interval:
            return None

        width = self._obstacle.width
        height = self._obstacle.height
        obstacle = Obstacle(
            uid=state.next_uid(),
            x=self._rng.random() * (self._arena_width - width),
            y=-height,
            width=width,
            height=height
        )
        state.obstacles.append(obstacle)
        state.last_obstacle_spawn = now
        return obstacle

    def try_spawn_coin(self, state: GameState, now: float) -> Optional[Coin]:
        """Spawn a coin if the coin interval has elapsed."""
        if not state.running:
            return None
        if now - state.last_coin_spawn <= self._coin_interval:
            return None

        width = self._coin.width
        height = self._coin.height
        x = self._rng.random() * (self._arena_width - width)
        coin = Coin(
            uid=state.next_uid(),
            x=x,
            y=-height,
            width=width,
            height=height,
            tier=self.choose_tier()
        )
        state.coins.append(coin)
        state.last_coin_spawn = now
        return coin

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the random source.

        Args:
            seed: New random seed. Keeps current if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
