"""
Tests for state snapshots and the solid renderer.
"""

import numpy as np
import pytest

from skyflyer.flyer_core.entities import Coin, CoinTier, Obstacle
from skyflyer.flyer_core.game import CoreGame
from skyflyer.flyer_core.render_solid import SolidRenderer
from skyflyer.flyer_core.state_snapshot import SnapshotBuilder


@pytest.fixture
def builder(config):
    return SnapshotBuilder(config)


class TestSnapshot:
    """Test snapshot packing."""

    def test_empty_state(self, builder, state):
        snap = builder.build(state)
        assert snap.obstacle_count == 0
        assert snap.coin_entity_count == 0
        assert snap.running
        assert not snap.obstacle_mask.any()

    def test_entities_packed_in_order(self, builder, state):
        state.obstacles.append(Obstacle(uid=1, x=10, y=20, width=70, height=30))
        state.obstacles.append(Obstacle(uid=2, x=30, y=40, width=70, height=30))
        state.coins.append(Coin(uid=3, x=5, y=6, width=40, height=40, tier=CoinTier.TRIPLE))

        snap = builder.build(state)

        assert snap.obstacle_count == 2
        np.testing.assert_allclose(snap.obstacle_x[:2], [10, 30])
        np.testing.assert_allclose(snap.obstacle_y[:2], [20, 40])
        assert snap.coin_multiplier[0] == 3
        assert snap.coin_mask.tolist()[:2] == [True, False]

    def test_overflow_is_truncated(self, builder, state, config):
        for i in range(config.observation.max_obstacles + 5):
            state.obstacles.append(Obstacle(uid=i, x=0, y=i, width=70, height=30))

        snap = builder.build(state)
        assert snap.obstacle_count == config.observation.max_obstacles
        assert snap.obstacle_y[0] == 0

    def test_snapshots_are_independent(self, builder, state):
        state.obstacles.append(Obstacle(uid=1, x=10, y=20, width=70, height=30))
        first = builder.build(state)
        state.obstacles.clear()
        builder.build(state)
        assert first.obstacle_count == 1

    def test_obs_dict_has_no_image(self, builder, state):
        obs = builder.build(state).to_obs_dict()
        assert "board_rgb" not in obs
        assert set(obs) == {
            "score", "coin_count", "player", "hitbox",
            "obstacle_x", "obstacle_y", "obstacle_mask",
            "coin_x", "coin_y", "coin_multiplier", "coin_mask",
        }


class TestSolidRenderer:
    """Test numpy rendering."""

    def test_render_shape_and_background(self, config):
        game = CoreGame(config=config, seed=0)
        renderer = SolidRenderer(config)

        img = renderer.render(game.get_render_data(), 120, 160)
        assert img.shape == (160, 120, 3)
        assert img.dtype == np.uint8
        # Top-left corner is empty sky
        assert tuple(img[0, 0]) == (135, 200, 235)

    def test_obstacle_pixels(self, config):
        game = CoreGame(config=config, seed=0)
        game.state.player.move_to(0, 0)
        game.state.obstacles.append(
            Obstacle(uid=0, x=300, y=500, width=70, height=30)
        )
        renderer = SolidRenderer(config)

        img = renderer.render(game.get_render_data(), config.arena.width, config.arena.height)
        assert tuple(img[510, 330]) == (110, 110, 120)

    def test_entities_off_canvas_are_clipped(self, config):
        game = CoreGame(config=config, seed=0)
        game.state.obstacles.append(Obstacle(uid=0, x=10, y=-30, width=70, height=30))
        renderer = SolidRenderer(config)

        img = renderer.render(game.get_render_data(), 100, 100)
        assert img.shape == (100, 100, 3)
