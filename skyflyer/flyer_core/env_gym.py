"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to Sky Flyer.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from skyflyer.flyer_core.config_loader import GameConfig, load_config
from skyflyer.flyer_core.game import CoreGame
from skyflyer.flyer_core.render_solid import SolidRenderer
from skyflyer.flyer_core.state import HighScoreStore, MemoryHighScoreStore
from skyflyer.flyer_core.state_snapshot import GameSnapshot, SnapshotBuilder


class SkyFlyerEnv(gym.Env):
    """
    Sky Flyer as a Gymnasium environment.

    Action Space:
        Box(low=0.0, high=1.0, shape=(2,), dtype=float32)
        Pointer position as a fraction of arena width and height.
        The player sprite is centred on it.

    Observation Space:
        Dict of player/hitbox boxes, score, coin count and padded
        obstacle and coin arrays with masks.

    Reward:
        Always 0.0. Agents must compute their own reward from the info dict.

    One env step is one game frame on a synthetic clock of ``frame_ms``.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        image_obs: bool = False,
        frame_ms: float = 1000.0 / 60.0,
        high_score_store: Optional[HighScoreStore] = None,
        debug: bool = False,
    ):
        """
        Initialize Sky Flyer environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy, None for headless.
            image_obs: If True, include board_rgb in observations.
            frame_ms: Synthetic milliseconds per step.
            high_score_store: Best-score persistence. In-memory if None.
            debug: If True, prints per-step debug output.
        """
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")

        self._config = load_config(config_path)

        self.render_mode = render_mode
        self._image_obs = image_obs
        self._frame_ms = float(frame_ms)
        self._debug = debug
        self._clock = 0.0

        self._img_width = self._config.observation.image_width
        self._img_height = self._config.observation.image_height

        if high_score_store is None:
            high_score_store = MemoryHighScoreStore(self._config.persistence.key)
        self._game = CoreGame(config=self._config, high_score_store=high_score_store)
        self._snapshot_builder = SnapshotBuilder(self._config)

        # Initialize renderer (lazy)
        self._renderer: Optional[SolidRenderer] = None

        self.action_space = spaces.Box(
            low=0.0,
            high=1.0,
            shape=(2,),
            dtype=np.float32
        )
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] SkyFlyerEnv initialized")
            print(f"[DEBUG]   Arena: {self._config.arena.width}x{self._config.arena.height}")
            print(f"[DEBUG]   Frame: {self._frame_ms:.2f} ms")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        arena = self._config.arena
        max_obs = self._config.observation.max_obstacles
        max_coins = self._config.observation.max_coins
        extent = float(max(arena.width, arena.height))

        obs_dict = {
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "coin_count": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "player": spaces.Box(low=0, high=extent, shape=(4,), dtype=np.float32),
            "hitbox": spaces.Box(low=0, high=extent, shape=(4,), dtype=np.float32),
            "obstacle_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obs,), dtype=np.float32),
            "obstacle_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obs,), dtype=np.float32),
            "obstacle_mask": spaces.MultiBinary(max_obs),
            "coin_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_coins,), dtype=np.float32),
            "coin_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_coins,), dtype=np.float32),
            "coin_multiplier": spaces.Box(low=0, high=3, shape=(max_coins,), dtype=np.int8),
            "coin_mask": spaces.MultiBinary(max_coins),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._clock = 0.0
        self._game.reset(seed=seed, start_time=self._clock)

        obs = self._snapshot_to_obs(self._snapshot_builder.build(self._game.state))
        info = self._game.get_info()
        info["delta_score"] = 0.0

        return obs, info

    def step(
        self,
        action: np.ndarray
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one frame.

        Args:
            action: Normalised pointer (x, y) in [0, 1].

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        ax, ay = np.clip(np.asarray(action, dtype=np.float64).reshape(2), 0.0, 1.0)
        self._game.move_player(ax * self._config.arena.width, ay * self._config.arena.height)

        self._clock += self._frame_ms
        result = self._game.step(self._clock)

        obs = self._snapshot_to_obs(self._snapshot_builder.build(self._game.state))
        reward = 0.0

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["collected"] = len(result.collected)
        if result.game_over is not None:
            info["final_score"] = result.game_over.final_score
            info["new_high_score"] = result.game_over.new_high_score

        if self._debug:
            print(f"[DEBUG] Frame {info['frame']}: score={info['score']}, "
                  f"coins={info['coin_count']}, obstacles={info['obstacle_count']}")
            if result.terminated:
                print(f"[DEBUG] GAME OVER: band={info['band']}")

        return obs, reward, self._game.is_over, False, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        obs = snapshot.to_obs_dict()
        if self._image_obs:
            obs["board_rgb"] = self._render_to_array()
        return obs

    def _render_to_array(self) -> np.ndarray:
        if self._renderer is None:
            self._renderer = SolidRenderer(self._config)
        return self._renderer.render(
            self._game.get_render_data(),
            self._img_width,
            self._img_height
        )

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
