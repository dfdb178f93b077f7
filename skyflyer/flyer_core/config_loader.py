"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

# Coin tier names understood by the game, see entities.CoinTier
TIER_NAMES = ("normal", "double", "triple")


@dataclass(frozen=True)
class ArenaConfig:
    """Playfield size in pixels."""
    width: int
    height: int


@dataclass(frozen=True)
class PlayerConfig:
    """Player sprite size and the collidable hitbox inside it."""
    width: float
    height: float
    hitbox_offset_x: float   # Fraction of sprite width
    hitbox_offset_y: float   # Fraction of sprite height
    hitbox_width: float      # Fraction of sprite width
    hitbox_height: float     # Fraction of sprite height


@dataclass(frozen=True)
class EntityConfig:
    """Size and per-frame fall speed of a falling entity kind."""
    width: float
    height: float
    speed: float


@dataclass(frozen=True)
class SpawnConfig:
    """Spawn intervals in milliseconds."""
    obstacle_interval_ms: float
    coin_interval_ms: float


@dataclass(frozen=True)
class CoinTierConfig:
    """A coin tier name and the upper bound of its probability band."""
    name: str
    below: float


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters."""
    time_increment: float
    coin_base_value: int


@dataclass(frozen=True)
class BadgeConfig:
    """A badge awarded once the displayed score reaches threshold."""
    threshold: int
    label: str


@dataclass(frozen=True)
class FeedbackConfig:
    """End-of-game score bands and their messages."""
    mid_threshold: int
    high_threshold: int
    messages: Dict[str, str]


@dataclass(frozen=True)
class PersistenceConfig:
    """Where the best score lives."""
    key: str
    path: str


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_obstacles: int
    max_coins: int
    image_width: int
    image_height: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    arena: ArenaConfig
    player: PlayerConfig
    obstacle: EntityConfig
    coin: EntityConfig
    spawn: SpawnConfig
    coin_tiers: Tuple[CoinTierConfig, ...]
    scoring: ScoringConfig
    badges: Tuple[BadgeConfig, ...]
    feedback: FeedbackConfig
    persistence: PersistenceConfig
    observation: ObservationConfig


def _parse_entity(data: dict) -> EntityConfig:
    return EntityConfig(
        width=float(data["width"]),
        height=float(data["height"]),
        speed=float(data["speed"])
    )


def _parse_coin_tiers(tiers_data: List) -> Tuple[CoinTierConfig, ...]:
    """Parse coin tier bands from YAML."""
    return tuple(
        CoinTierConfig(
            name=str(t["name"]).lower(),
            below=float(t["below"])
        )
        for t in tiers_data
    )


def _parse_badges(badges_data: List) -> Tuple[BadgeConfig, ...]:
    """Parse badges, sorted by ascending threshold."""
    badges = [
        BadgeConfig(threshold=int(b["threshold"]), label=str(b["label"]))
        for b in badges_data
    ]
    return tuple(sorted(badges, key=lambda b: b.threshold))


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.arena.width <= 0 or config.arena.height <= 0:
        raise ValueError(f"Arena size must be positive, got {config.arena.width}x{config.arena.height}")

    # Entities and player must fit inside the arena
    for name, w in (
        ("player", config.player.width),
        ("obstacle", config.obstacle.width),
        ("coin", config.coin.width),
    ):
        if not 0 < w <= config.arena.width:
            raise ValueError(f"{name} width ({w}) must be in (0, {config.arena.width}]")
    if not 0 < config.player.height <= config.arena.height:
        raise ValueError(f"player height ({config.player.height}) must be in (0, {config.arena.height}]")

    # Hitbox must lie inside the sprite
    p = config.player
    if p.hitbox_width <= 0 or p.hitbox_height <= 0:
        raise ValueError("Player hitbox must have positive size")
    if p.hitbox_offset_x < 0 or p.hitbox_offset_x + p.hitbox_width > 1.0:
        raise ValueError("Player hitbox exceeds sprite width")
    if p.hitbox_offset_y < 0 or p.hitbox_offset_y + p.hitbox_height > 1.0:
        raise ValueError("Player hitbox exceeds sprite height")

    # Tier bands must be increasing and cover [0, 1)
    if not config.coin_tiers:
        raise ValueError("At least one coin tier is required")
    previous = 0.0
    for tier in config.coin_tiers:
        if tier.below <= previous:
            raise ValueError(f"Coin tier bands must increase, got {tier.below} after {previous}")
        if tier.name not in TIER_NAMES:
            raise ValueError(f"Unknown coin tier '{tier.name}', expected one of {TIER_NAMES}")
        previous = tier.below
    if config.coin_tiers[-1].below != 1.0:
        raise ValueError("Last coin tier band must end at 1.0")

    fb = config.feedback
    if not 0 <= fb.mid_threshold <= fb.high_threshold:
        raise ValueError(
            f"feedback thresholds must satisfy 0 <= mid ({fb.mid_threshold}) "
            f"<= high ({fb.high_threshold})"
        )
    for band in ("low", "mid", "high"):
        if band not in fb.messages:
            raise ValueError(f"Missing feedback message for band '{band}'")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    arena_data = raw["arena"]
    arena = ArenaConfig(
        width=int(arena_data["width"]),
        height=int(arena_data["height"])
    )

    player_data = raw["player"]
    player = PlayerConfig(
        width=float(player_data["width"]),
        height=float(player_data["height"]),
        hitbox_offset_x=float(player_data.get("hitbox_offset_x", 0.0)),
        hitbox_offset_y=float(player_data.get("hitbox_offset_y", 0.0)),
        hitbox_width=float(player_data.get("hitbox_width", 1.0)),
        hitbox_height=float(player_data.get("hitbox_height", 1.0))
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        obstacle_interval_ms=float(spawn_data["obstacle_interval_ms"]),
        coin_interval_ms=float(spawn_data["coin_interval_ms"])
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        time_increment=float(scoring_data["time_increment"]),
        coin_base_value=int(scoring_data["coin_base_value"])
    )

    feedback_data = raw["feedback"]
    feedback = FeedbackConfig(
        mid_threshold=int(feedback_data["mid_threshold"]),
        high_threshold=int(feedback_data["high_threshold"]),
        messages={str(k): str(v) for k, v in feedback_data.get("messages", {}).items()}
    )

    persistence_data = raw.get("persistence", {})
    persistence = PersistenceConfig(
        key=str(persistence_data.get("key", "skyFlyerHighScore")),
        path=str(persistence_data.get("path", "~/.skyflyer/highscore.json"))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_obstacles=int(obs_data.get("max_obstacles", 32)),
        max_coins=int(obs_data.get("max_coins", 32)),
        image_width=int(obs_data.get("image_width", 240)),
        image_height=int(obs_data.get("image_height", 320))
    )

    config = GameConfig(
        arena=arena,
        player=player,
        obstacle=_parse_entity(raw["obstacle"]),
        coin=_parse_entity(raw["coin"]),
        spawn=spawn,
        coin_tiers=_parse_coin_tiers(raw["coin_tiers"]),
        scoring=scoring,
        badges=_parse_badges(raw.get("badges", [])),
        feedback=feedback,
        persistence=persistence,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config
