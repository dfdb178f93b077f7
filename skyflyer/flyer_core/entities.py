"""
Entities
========

Pure logical entities owned by the simulation: the player, falling
obstacles and coins. Coordinates are arena-local pixels with Y pointing down.
Rendering handles are never stored here; presentation code keys its own
handles by ``uid``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any

from skyflyer.flyer_core.config_loader import GameConfig, PlayerConfig


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle."""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def as_tuple(self) -> tuple:
        return (self.left, self.top, self.width, self.height)


class CoinTier(Enum):
    """Coin classification. The value is the score/count multiplier."""
    NORMAL = 1
    DOUBLE = 2
    TRIPLE = 3

    @property
    def multiplier(self) -> int:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "CoinTier":
        return cls[name.upper()]


@dataclass
class Obstacle:
    """A falling block. Touching it with the hitbox ends the game."""
    uid: int
    x: float
    y: float
    width: float
    height: float

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def to_render_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class Coin:
    """A falling coin worth ``tier.multiplier`` base values."""
    uid: int
    x: float
    y: float
    width: float
    height: float
    tier: CoinTier = CoinTier.NORMAL

    @property
    def multiplier(self) -> int:
        return self.tier.multiplier

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def to_render_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "tier": self.tier.name.lower(),
            "multiplier": self.multiplier,
        }


class PlayerPosition:
    """
    Player sprite position, kept inside the arena.

    Only the hitbox (the parachute region) takes part in collisions;
    the full sprite box is for display.
    """

    def __init__(self, player: PlayerConfig, arena_width: float, arena_height: float):
        self._cfg = player
        self.width = player.width
        self.height = player.height
        self._max_x = arena_width - player.width
        self._max_y = arena_height - player.height

        # Start centred
        self.x = self._max_x / 2
        self.y = self._max_y / 2

    @classmethod
    def from_config(cls, config: GameConfig) -> "PlayerPosition":
        return cls(config.player, config.arena.width, config.arena.height)

    def move_to(self, x: float, y: float) -> None:
        """Place the sprite's top-left corner at (x, y), clamped to the arena."""
        self.x = max(0.0, min(x, self._max_x))
        self.y = max(0.0, min(y, self._max_y))

    def center_on(self, px: float, py: float) -> None:
        """Centre the sprite on a pointer position."""
        self.move_to(px - self.width / 2, py - self.height / 2)

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    @property
    def hitbox(self) -> Rect:
        cfg = self._cfg
        return Rect(
            self.x + cfg.hitbox_offset_x * self.width,
            self.y + cfg.hitbox_offset_y * self.height,
            cfg.hitbox_width * self.width,
            cfg.hitbox_height * self.height,
        )

    def __repr__(self) -> str:
        return f"PlayerPosition(x={self.x:.1f}, y={self.y:.1f})"
