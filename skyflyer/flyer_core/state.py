"""
State Store
===========

The single mutable record every component works on, plus the best-score
persistence behind it.
"""

from __future__ import annotations

import json
import math
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from skyflyer.flyer_core.config_loader import GameConfig, get_config
from skyflyer.flyer_core.entities import Coin, Obstacle, PlayerPosition


class HighScoreStore(ABC):
    """Key -> integer store holding the best score."""

    def __init__(self, key: str = "skyFlyerHighScore"):
        self.key = key

    def load(self) -> int:
        """Read the stored value. Absent or malformed values read as 0."""
        return _coerce_score(self._read().get(self.key))

    def save(self, value: int) -> None:
        data = self._read()
        data[self.key] = int(value)
        self._write(data)

    @abstractmethod
    def _read(self) -> Dict[str, object]:
        """Return the whole key-value mapping."""

    @abstractmethod
    def _write(self, data: Dict[str, object]) -> None:
        """Replace the whole key-value mapping."""


class MemoryHighScoreStore(HighScoreStore):
    """In-process store for tests and headless environments."""

    def __init__(self, key: str = "skyFlyerHighScore", initial: Optional[object] = None):
        super().__init__(key)
        self._data: Dict[str, object] = {}
        if initial is not None:
            self._data[key] = initial
        self.writes = 0

    def _read(self) -> Dict[str, object]:
        return dict(self._data)

    def _write(self, data: Dict[str, object]) -> None:
        self._data = dict(data)
        self.writes += 1


class JsonHighScoreStore(HighScoreStore):
    """Store backed by a small JSON file."""

    def __init__(self, path: Union[str, Path], key: str = "skyFlyerHighScore"):
        super().__init__(key)
        self.path = Path(os.path.expanduser(str(path)))

    def _read(self) -> Dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, object]) -> None:
        # A failed save keeps the game running; the in-memory best still holds
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w") as f:
                json.dump(data, f)
            os.replace(tmp, self.path)
        except OSError as e:
            print(f"Warning: could not save high score to {self.path}: {e}")
            try:
                tmp.unlink()
            except OSError:
                pass

    @classmethod
    def from_config(cls, config: GameConfig) -> "JsonHighScoreStore":
        return cls(config.persistence.path, config.persistence.key)


def _coerce_score(raw: object) -> int:
    """Parse a stored score, falling back to 0."""
    if isinstance(raw, bool) or raw is None:
        return 0
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, value)


@dataclass
class GameState:
    """
    Mutable game record passed by reference to each component.

    ``running`` goes from True to False exactly once.
    """
    player: PlayerPosition
    score: float = 0.0
    coin_count: int = 0
    high_score: int = 0
    running: bool = True
    obstacles: List[Obstacle] = field(default_factory=list)
    coins: List[Coin] = field(default_factory=list)
    last_obstacle_spawn: float = 0.0
    last_coin_spawn: float = 0.0
    frame: int = 0
    high_score_store: Optional[HighScoreStore] = None
    _next_uid: int = 0

    @classmethod
    def new(
        cls,
        config: Optional[GameConfig] = None,
        high_score_store: Optional[HighScoreStore] = None
    ) -> "GameState":
        """
        Create a fresh state, reading the stored best score once.

        Args:
            config: Game configuration. Uses default if None.
            high_score_store: Persistence for the best score. Nothing is
                persisted if None.
        """
        if config is None:
            config = get_config()
        high_score = high_score_store.load() if high_score_store is not None else 0
        return cls(
            player=PlayerPosition.from_config(config),
            high_score=high_score,
            high_score_store=high_score_store
        )

    @property
    def displayed_score(self) -> int:
        """Score as shown to the player."""
        return math.floor(self.score)

    def next_uid(self) -> int:
        uid = self._next_uid
        self._next_uid += 1
        return uid

    def record_high_score(self, candidate: float) -> bool:
        """
        Raise the best score to floor(candidate) if that beats it.

        Returns:
            True if a new best score was stored.
        """
        value = math.floor(candidate)
        if value <= self.high_score:
            return False
        self.high_score = value
        if self.high_score_store is not None:
            self.high_score_store.save(value)
        return True
