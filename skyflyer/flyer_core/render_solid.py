"""
Solid Renderer
==============

Fast numpy-based renderer that draws every entity as a solid rectangle.
Shows the player's hitbox on top of the sprite box.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence
import numpy as np

from skyflyer.flyer_core.config_loader import GameConfig, get_config


class SolidRenderer:
    """
    Renders the arena as solid-color rectangles.

    Uses numpy for fast CPU-based rendering without pygame.
    """

    def __init__(self, config: Optional[GameConfig] = None, show_hitbox: bool = True):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
            show_hitbox: Whether to draw the player's hitbox.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._show_hitbox = show_hitbox

        # Sky background
        self._bg_color = np.array([135, 200, 235], dtype=np.uint8)
        self._player_color = np.array([250, 250, 250], dtype=np.uint8)
        self._hitbox_color = np.array([220, 60, 60], dtype=np.uint8)
        self._obstacle_color = np.array([110, 110, 120], dtype=np.uint8)
        self._game_over_tint = np.array([40, 40, 50], dtype=np.uint8)

        self._coin_colors = {
            1: np.array([240, 200, 40], dtype=np.uint8),    # normal: gold
            2: np.array([80, 220, 230], dtype=np.uint8),    # double: diamond
            3: np.array([250, 120, 220], dtype=np.uint8),   # triple: star
        }

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.zeros((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        sx = width / render_data["arena_width"]
        sy = height / render_data["arena_height"]

        for obstacle in render_data["obstacles"]:
            self._fill_rect(
                img, (obstacle["x"], obstacle["y"], obstacle["width"], obstacle["height"]),
                sx, sy, self._obstacle_color
            )

        for coin in render_data["coins"]:
            color = self._coin_colors.get(coin["multiplier"], self._coin_colors[1])
            self._fill_rect(img, (coin["x"], coin["y"], coin["width"], coin["height"]), sx, sy, color)

        self._fill_rect(img, render_data["player"], sx, sy, self._player_color)
        if self._show_hitbox:
            self._outline_rect(img, render_data["hitbox"], sx, sy, self._hitbox_color)

        if not render_data.get("running", True):
            # Darken the board once the game has ended
            img[:] = (img // 2) + (self._game_over_tint // 2)

        return img

    @staticmethod
    def _to_pixels(rect: Sequence[float], sx: float, sy: float, img: np.ndarray):
        """Scale an arena rect to clipped pixel bounds (x0, y0, x1, y1)."""
        h, w = img.shape[:2]
        x, y, rw, rh = rect
        x0 = int(max(0, min(w, round(x * sx))))
        y0 = int(max(0, min(h, round(y * sy))))
        x1 = int(max(0, min(w, round((x + rw) * sx))))
        y1 = int(max(0, min(h, round((y + rh) * sy))))
        return x0, y0, x1, y1

    def _fill_rect(self, img: np.ndarray, rect: Sequence[float], sx: float, sy: float,
                   color: np.ndarray) -> None:
        x0, y0, x1, y1 = self._to_pixels(rect, sx, sy, img)
        if x1 > x0 and y1 > y0:
            img[y0:y1, x0:x1] = color

    def _outline_rect(self, img: np.ndarray, rect: Sequence[float], sx: float, sy: float,
                      color: np.ndarray) -> None:
        x0, y0, x1, y1 = self._to_pixels(rect, sx, sy, img)
        if x1 <= x0 or y1 <= y0:
            return
        img[y0, x0:x1] = color
        img[y1 - 1, x0:x1] = color
        img[y0:y1, x0] = color
        img[y0:y1, x1 - 1] = color

    def close(self) -> None:
        """Nothing to release; present for renderer interface parity."""
        pass
