"""
Core Game
=========

Main game orchestrator combining spawning, motion, collision and scoring.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from skyflyer.flyer_core.config_loader import GameConfig, get_config
from skyflyer.flyer_core.motion import MotionEngine
from skyflyer.flyer_core.scoring import GameOverResult, ScoreEvent, ScoreTracker
from skyflyer.flyer_core.spawner import Spawner
from skyflyer.flyer_core.state import GameState, HighScoreStore


@dataclass
class FrameResult:
    """Result of a single frame."""
    timestamp: float
    running: bool
    displayed_score: int
    coin_count: int
    badges: List[str]
    delta_score: float = 0.0
    spawned: List[int] = field(default_factory=list)
    removed: List[int] = field(default_factory=list)
    collected: List[ScoreEvent] = field(default_factory=list)
    hit_obstacle: Optional[int] = None
    game_over: Optional[GameOverResult] = None

    @property
    def terminated(self) -> bool:
        """True only for the frame in which the game ended."""
        return self.game_over is not None


class CoreGame:
    """
    Main game simulation class.

    Orchestrates, once per frame:
    - Spawner (obstacles and coins)
    - Motion and off-screen culling
    - Score accrual, obstacle collision, coin collection

    The host owns the loop: it calls ``step`` with a monotonically increasing
    timestamp in milliseconds and stops once ``is_over`` is True.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        high_score_store: Optional[HighScoreStore] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            high_score_store: Persistence for the best score. Nothing is
                persisted if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._store = high_score_store

        # Initialize subsystems
        self._spawner = Spawner(config, seed)
        self._motion = MotionEngine(config)
        self._scorer = ScoreTracker(config)

        self._state = GameState.new(config, high_score_store)
        self._game_over: Optional[GameOverResult] = None
        self._badges: List[str] = []

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def state(self) -> GameState:
        """Live game state."""
        return self._state

    @property
    def score(self) -> int:
        """Displayed (floored) score."""
        return self._state.displayed_score

    @property
    def coin_count(self) -> int:
        return self._state.coin_count

    @property
    def high_score(self) -> int:
        return self._state.high_score

    @property
    def badges(self) -> List[str]:
        """Badges shown after the last frame."""
        return list(self._badges)

    @property
    def is_over(self) -> bool:
        """True if game has ended."""
        return not self._state.running

    @property
    def game_over_result(self) -> Optional[GameOverResult]:
        return self._game_over

    def reset(self, seed: Optional[int] = None, start_time: float = 0.0) -> GameState:
        """
        Reset game to initial state.

        The best score is re-read from the store, and spawn timers start at
        ``start_time`` so a restarted game waits a full interval before the
        first spawn.

        Args:
            seed: New random seed. Uses previous if None.
            start_time: Host timestamp (ms) the new game starts at.

        Returns:
            The fresh game state.
        """
        if seed is not None:
            self._seed = seed
        self._spawner.reset(self._seed)

        state = GameState.new(self._config, self._store)
        if self._store is None:
            # No store: carry the best score across restarts in memory
            state.high_score = self._state.high_score
        state.last_obstacle_spawn = start_time
        state.last_coin_spawn = start_time
        self._state = state
        self._game_over = None
        self._badges = []
        return state

    def move_player(self, x: float, y: float) -> None:
        """
        Pointer moved to arena-local (x, y). The sprite is centred on it.

        Ignored once the game has ended.
        """
        if not self._state.running:
            return
        self._state.player.center_on(x, y)

    def step(self, timestamp: float) -> FrameResult:
        """
        Run one frame.

        Args:
            timestamp: Host frame time in milliseconds.

        Returns:
            FrameResult describing what changed.
        """
        state = self._state
        if not state.running:
            # Game already ended, nothing moves
            return FrameResult(
                timestamp=timestamp,
                running=False,
                displayed_score=state.displayed_score,
                coin_count=state.coin_count,
                badges=list(self._badges)
            )

        score_before = state.score
        spawned: List[int] = []
        removed: List[int] = []

        # Spawn
        obstacle = self._spawner.try_spawn_obstacle(state, timestamp)
        if obstacle is not None:
            spawned.append(obstacle.uid)
        coin = self._spawner.try_spawn_coin(state, timestamp)
        if coin is not None:
            spawned.append(coin.uid)

        # Move and cull
        removed.extend(self._motion.advance(state))

        # Survival score
        self._scorer.accrue_time(state)

        # Obstacles end the game; the first hit wins
        hit = self._motion.find_obstacle_hit(state)
        game_over: Optional[GameOverResult] = None
        collected: List[ScoreEvent] = []
        if hit is not None:
            game_over = self._scorer.end_game(state)
            self._game_over = game_over
        else:
            for coin in self._motion.collect_coins(state):
                collected.append(self._scorer.apply_coin(state, coin))
                removed.append(coin.uid)

        # After coin credit so this frame's coins count toward badges
        self._badges = self._scorer.badges_for(state.displayed_score)
        state.frame += 1

        return FrameResult(
            timestamp=timestamp,
            running=state.running,
            displayed_score=state.displayed_score,
            coin_count=state.coin_count,
            badges=list(self._badges),
            delta_score=state.score - score_before,
            spawned=spawned,
            removed=removed,
            collected=collected,
            hit_obstacle=hit.uid if hit is not None else None,
            game_over=game_over
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        state = self._state
        return {
            "score": state.displayed_score,
            "raw_score": state.score,
            "coin_count": state.coin_count,
            "high_score": state.high_score,
            "frame": state.frame,
            "obstacle_count": len(state.obstacles),
            "coin_entities": len(state.coins),
            "badges": list(self._badges),
            "band": self._game_over.band.value if self._game_over else "",
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with scores, badges, entity boxes and the game-over summary.
        """
        state = self._state
        game_over = None
        if self._game_over is not None:
            game_over = {
                "final_score": self._game_over.final_score,
                "coin_count": self._game_over.coin_count,
                "band": self._game_over.band.value,
                "message": self._game_over.message,
                "new_high_score": self._game_over.new_high_score,
            }

        return {
            "arena_width": self._config.arena.width,
            "arena_height": self._config.arena.height,
            "score": state.displayed_score,
            "coin_count": state.coin_count,
            "high_score": state.high_score,
            "badges": list(self._badges),
            "running": state.running,
            "player": state.player.rect.as_tuple(),
            "hitbox": state.player.hitbox.as_tuple(),
            "obstacles": [o.to_render_dict() for o in state.obstacles],
            "coins": [c.to_render_dict() for c in state.coins],
            "game_over": game_over,
        }
