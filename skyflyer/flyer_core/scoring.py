"""
Scoring & Termination
=====================

Time-based score accrual, coin collection, badges and the game-over
transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from skyflyer.flyer_core.config_loader import GameConfig, get_config
from skyflyer.flyer_core.entities import Coin
from skyflyer.flyer_core.state import GameState


class FeedbackBand(Enum):
    """Score range used to pick the end-of-game message."""
    LOW = "low"
    MID = "mid"
    HIGH = "high"


@dataclass
class ScoreEvent:
    """Record of a coin collection."""
    points: int
    coins: int
    coin_uid: int

    def __repr__(self) -> str:
        return f"ScoreEvent(coin={self.coin_uid}, points={self.points}, coins={self.coins})"


@dataclass
class GameOverResult:
    """What the presentation layer needs once the game has ended."""
    final_score: int
    coin_count: int
    band: FeedbackBand
    message: str
    new_high_score: bool
    high_score: int


class ScoreTracker:
    """
    Applies score changes to a GameState.

    Score accrues by a flat amount per frame; coins add
    ``coin_base_value * multiplier`` points and ``multiplier`` to the coin count.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._time_increment = config.scoring.time_increment
        self._coin_base_value = config.scoring.coin_base_value
        self._badges = config.badges
        self._feedback = config.feedback

    def accrue_time(self, state: GameState) -> None:
        """Add the per-frame survival increment."""
        state.score += self._time_increment

    def apply_coin(self, state: GameState, coin: Coin) -> ScoreEvent:
        """Credit a collected coin."""
        multiplier = coin.multiplier
        points = self._coin_base_value * multiplier
        state.score += points
        state.coin_count += multiplier
        return ScoreEvent(points=points, coins=multiplier, coin_uid=coin.uid)

    def badges_for(self, displayed_score: int) -> List[str]:
        """Labels of every badge earned at this score, lowest threshold first."""
        return [b.label for b in self._badges if displayed_score >= b.threshold]

    def band_for(self, final_score: int) -> FeedbackBand:
        if final_score < self._feedback.mid_threshold:
            return FeedbackBand.LOW
        if final_score < self._feedback.high_threshold:
            return FeedbackBand.MID
        return FeedbackBand.HIGH

    def message_for(self, band: FeedbackBand) -> str:
        return self._feedback.messages.get(band.value, "")

    def end_game(self, state: GameState) -> Optional[GameOverResult]:
        """
        Stop the game and settle the final score.

        Returns:
            GameOverResult, or None if the game had already ended.
        """
        if not state.running:
            return None
        state.running = False

        final_score = state.displayed_score
        new_high = state.record_high_score(final_score)
        band = self.band_for(final_score)

        return GameOverResult(
            final_score=final_score,
            coin_count=state.coin_count,
            band=band,
            message=self.message_for(band),
            new_high_score=new_high,
            high_score=state.high_score
        )
