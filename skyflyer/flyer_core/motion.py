"""
Motion & Collision
==================

Moves falling entities each frame, culls the ones that left the arena and
tests them against the player's hitbox.
"""

from __future__ import annotations

from typing import List, Optional

from skyflyer.flyer_core.config_loader import GameConfig, get_config
from skyflyer.flyer_core.entities import Coin, Obstacle, Rect
from skyflyer.flyer_core.state import GameState


def rects_overlap(r1: Rect, r2: Rect) -> bool:
    """True if two rectangles overlap. Touching edges do not count."""
    return not (
        r1.right <= r2.left
        or r1.left >= r2.right
        or r1.bottom <= r2.top
        or r1.top >= r2.bottom
    )


class MotionEngine:
    """
    Per-frame motion and collision for obstacles and coins.

    Speeds are pixels per call, not per second.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._arena_height = config.arena.height
        self._obstacle_speed = config.obstacle.speed
        self._coin_speed = config.coin.speed

    def advance(self, state: GameState) -> List[int]:
        """
        Move every entity down and drop the ones below the arena.

        Returns:
            UIDs of culled entities, so their render handles can be released.
        """
        removed: List[int] = []

        for i in range(len(state.obstacles) - 1, -1, -1):
            obstacle = state.obstacles[i]
            obstacle.y += self._obstacle_speed
            if obstacle.y > self._arena_height:
                removed.append(obstacle.uid)
                del state.obstacles[i]

        for i in range(len(state.coins) - 1, -1, -1):
            coin = state.coins[i]
            coin.y += self._coin_speed
            if coin.y > self._arena_height:
                removed.append(coin.uid)
                del state.coins[i]

        return removed

    def find_obstacle_hit(self, state: GameState) -> Optional[Obstacle]:
        """First obstacle, in stored order, touching the player's hitbox."""
        hitbox = state.player.hitbox
        for obstacle in state.obstacles:
            if rects_overlap(hitbox, obstacle.rect):
                return obstacle
        return None

    def collect_coins(self, state: GameState) -> List[Coin]:
        """
        Remove and return every coin touching the player's hitbox.

        Coins are scanned from the back so removal is safe mid-scan.
        """
        hitbox = state.player.hitbox
        collected: List[Coin] = []
        for i in range(len(state.coins) - 1, -1, -1):
            coin = state.coins[i]
            if rects_overlap(hitbox, coin.rect):
                collected.append(coin)
                del state.coins[i]
        return collected
