"""
Human Play Mode
===============

Play Sky Flyer interactively with mouse control.

Controls:
    - Mouse: Steer the flyer
    - R: Restart game
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--scale SCALE] [--fps FPS]
"""

from __future__ import annotations

import argparse
import sys
from typing import Dict, Optional, Tuple

import pygame

from skyflyer.flyer_core.config_loader import GameConfig, load_config
from skyflyer.flyer_core.game import CoreGame, FrameResult
from skyflyer.flyer_core.state import JsonHighScoreStore


class SpriteTable:
    """
    Render handles keyed by entity uid.

    The simulation only knows uids and boxes; this table creates a surface
    the first time a uid is seen and drops it when the entity goes away.
    """

    def __init__(self, scale: float):
        self._scale = scale
        self._handles: Dict[int, pygame.Surface] = {}

        self._obstacle_color = (120, 120, 130)
        self._obstacle_edge = (80, 80, 90)
        self._coin_colors = {
            "normal": (245, 200, 50),
            "double": (90, 220, 235),
            "triple": (250, 130, 220),
        }

    def __len__(self) -> int:
        return len(self._handles)

    def get(self, entity: dict, kind: str) -> pygame.Surface:
        uid = entity["uid"]
        surface = self._handles.get(uid)
        if surface is None:
            surface = self._make_surface(entity, kind)
            self._handles[uid] = surface
        return surface

    def release(self, uid: int) -> None:
        self._handles.pop(uid, None)

    def sync(self, result: FrameResult) -> None:
        """Drop handles for entities culled or collected this frame."""
        for uid in result.removed:
            self.release(uid)

    def clear(self) -> None:
        self._handles.clear()

    def _make_surface(self, entity: dict, kind: str) -> pygame.Surface:
        w = max(1, int(entity["width"] * self._scale))
        h = max(1, int(entity["height"] * self._scale))
        surface = pygame.Surface((w, h), pygame.SRCALPHA)
        if kind == "obstacle":
            pygame.draw.rect(surface, self._obstacle_color, (0, 0, w, h), border_radius=4)
            pygame.draw.rect(surface, self._obstacle_edge, (0, 0, w, h), 2, border_radius=4)
        else:
            color = self._coin_colors.get(entity["tier"], self._coin_colors["normal"])
            pygame.draw.ellipse(surface, color, (0, 0, w, h))
            pygame.draw.ellipse(surface, (255, 255, 255), (0, 0, w, h), 2)
        return surface


class FlyerRenderer:
    """Draws the arena, HUD and game-over panel."""

    def __init__(self, config: GameConfig, scale: float):
        self._config = config
        self._scale = scale

        self._hud_height = 70
        self._arena_w = int(config.arena.width * scale)
        self._arena_h = int(config.arena.height * scale)
        self._board_x = 0
        self._board_y = self._hud_height
        self.window_size = (self._arena_w, self._arena_h + self._hud_height)

        # Colors
        self._sky_top = (120, 190, 240)
        self._sky_bottom = (200, 230, 250)
        self._hud_bg = (40, 60, 90)
        self._text = (250, 250, 250)
        self._text_dim = (180, 200, 220)
        self._player_color = (255, 255, 255)
        self._parachute_color = (240, 90, 90)

        pygame.font.init()
        self._font_huge = pygame.font.Font(None, 56)
        self._font_large = pygame.font.Font(None, 36)
        self._font_medium = pygame.font.Font(None, 26)
        self._font_small = pygame.font.Font(None, 20)

        self._bg_surface = self._create_gradient_background()
        self.sprites = SpriteTable(scale)

    def _create_gradient_background(self) -> pygame.Surface:
        surface = pygame.Surface((self._arena_w, self._arena_h))
        for y in range(self._arena_h):
            t = y / self._arena_h
            color = tuple(
                int(a * (1 - t) + b * t) for a, b in zip(self._sky_top, self._sky_bottom)
            )
            pygame.draw.line(surface, color, (0, y), (self._arena_w, y))
        return surface

    def window_to_arena(self, pos: Tuple[int, int]) -> Tuple[float, float]:
        """Convert a window pixel to arena-local coordinates."""
        return (
            (pos[0] - self._board_x) / self._scale,
            (pos[1] - self._board_y) / self._scale,
        )

    def _to_screen(self, x: float, y: float) -> Tuple[int, int]:
        return (int(self._board_x + x * self._scale), int(self._board_y + y * self._scale))

    def _scaled_rect(self, rect) -> pygame.Rect:
        x, y, w, h = rect
        sx, sy = self._to_screen(x, y)
        return pygame.Rect(sx, sy, int(w * self._scale), int(h * self._scale))

    def render(self, screen: pygame.Surface, render_data: dict) -> None:
        screen.fill(self._hud_bg)
        screen.blit(self._bg_surface, (self._board_x, self._board_y))

        for obstacle in render_data["obstacles"]:
            screen.blit(self.sprites.get(obstacle, "obstacle"),
                        self._to_screen(obstacle["x"], obstacle["y"]))
        for coin in render_data["coins"]:
            screen.blit(self.sprites.get(coin, "coin"), self._to_screen(coin["x"], coin["y"]))

        self._draw_player(screen, render_data)
        self._draw_hud(screen, render_data)

        if render_data["game_over"] is not None:
            self._draw_game_over(screen, render_data["game_over"])

    def _draw_player(self, screen: pygame.Surface, render_data: dict) -> None:
        body = self._scaled_rect(render_data["player"])
        canopy = self._scaled_rect(render_data["hitbox"])

        # Canopy, lines, flyer
        pygame.draw.ellipse(screen, self._parachute_color, canopy)
        flyer = pygame.Rect(0, 0, body.width // 3, body.height // 3)
        flyer.midbottom = body.midbottom
        pygame.draw.line(screen, self._player_color, canopy.bottomleft, flyer.topleft, 1)
        pygame.draw.line(screen, self._player_color, canopy.bottomright, flyer.topright, 1)
        pygame.draw.rect(screen, self._player_color, flyer, border_radius=6)

    def _draw_hud(self, screen: pygame.Surface, render_data: dict) -> None:
        score = self._font_large.render(f"Score {render_data['score']}", True, self._text)
        screen.blit(score, (12, 8))

        coins = self._font_medium.render(f"Coins {render_data['coin_count']}", True, self._text)
        screen.blit(coins, (12, 40))

        best = self._font_medium.render(f"Best {render_data['high_score']}", True, self._text_dim)
        screen.blit(best, (self._arena_w - best.get_width() - 12, 10))

        if render_data["badges"]:
            badges = self._font_small.render("  ".join(render_data["badges"]), True, (255, 220, 120))
            screen.blit(badges, (self._arena_w - badges.get_width() - 12, 44))

    def _draw_game_over(self, screen: pygame.Surface, summary: dict) -> None:
        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 150))
        screen.blit(overlay, (0, 0))

        box_w = min(self._arena_w - 40, 400)
        box_h = 200
        box = pygame.Rect(0, 0, box_w, box_h)
        box.center = screen.get_rect().center
        pygame.draw.rect(screen, (255, 252, 245), box, border_radius=16)
        pygame.draw.rect(screen, (200, 160, 120), box, 3, border_radius=16)

        dark = (60, 50, 40)
        title = self._font_huge.render("GAME OVER", True, dark)
        screen.blit(title, (box.centerx - title.get_width() // 2, box.y + 18))

        line = f"Your Score: {summary['final_score']} | Coins: {summary['coin_count']}"
        text = self._font_medium.render(line, True, dark)
        screen.blit(text, (box.centerx - text.get_width() // 2, box.y + 75))

        y = box.y + 105
        for chunk in _wrap(summary["message"], self._font_small, box_w - 30):
            msg = self._font_small.render(chunk, True, dark)
            screen.blit(msg, (box.centerx - msg.get_width() // 2, y))
            y += 20

        hint = self._font_small.render("Press R to restart", True, (140, 110, 80))
        screen.blit(hint, (box.centerx - hint.get_width() // 2, box.bottom - 28))


def _wrap(text: str, font: pygame.font.Font, max_width: int):
    """Greedy word wrap."""
    words = text.split()
    line = ""
    for word in words:
        candidate = f"{line} {word}".strip()
        if font.size(candidate)[0] <= max_width or not line:
            line = candidate
        else:
            yield line
            line = word
    if line:
        yield line


class HumanPlayer:
    """
    Interactive Sky Flyer. Owns the frame loop and feeds the core one
    timestamp per frame.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        scale: float = 1.0,
        target_fps: int = 60
    ):
        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._target_fps = target_fps

        pygame.init()
        self._renderer = FlyerRenderer(config, scale)
        self._screen = pygame.display.set_mode(self._renderer.window_size)
        pygame.display.set_caption("Sky Flyer")
        self._clock = pygame.time.Clock()

        self._game = CoreGame(
            config=config,
            seed=seed,
            high_score_store=JsonHighScoreStore.from_config(config)
        )
        self._game.reset(seed=seed, start_time=pygame.time.get_ticks())

        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns the last final score."""
        print("=== Sky Flyer ===")
        print("Move the mouse to fly. R to restart, ESC to quit")
        print()

        while self._running:
            self._handle_events()

            if not self._game.is_over:
                result = self._game.step(pygame.time.get_ticks())
                self._renderer.sprites.sync(result)
                if result.game_over is not None:
                    self._announce(result)

            self._renderer.render(self._screen, self._game.get_render_data())
            pygame.display.flip()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.score

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._restart()
            elif event.type == pygame.MOUSEMOTION:
                x, y = self._renderer.window_to_arena(event.pos)
                self._game.move_player(x, y)

    def _announce(self, result: FrameResult) -> None:
        summary = result.game_over
        print(f"GAME OVER - Score: {summary.final_score} | Coins: {summary.coin_count}")
        if summary.new_high_score:
            print(f"New best score: {summary.high_score}")
        print(summary.message)

    def _restart(self) -> None:
        self._game.reset(seed=self._seed, start_time=pygame.time.get_ticks())
        self._renderer.sprites.clear()
        print("\n=== Game Restarted ===\n")


def main():
    parser = argparse.ArgumentParser(description="Play Sky Flyer interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--scale", type=float, default=1.0, help="Window scale (default: 1.0)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    player = HumanPlayer(
        config=config,
        seed=args.seed,
        scale=args.scale,
        target_fps=args.fps
    )
    score = player.run()
    print(f"\nFinal Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
