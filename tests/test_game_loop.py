"""
Tests for the per-frame game loop.
"""

import math

import pytest

from skyflyer.flyer_core.entities import Coin, CoinTier, Obstacle
from skyflyer.flyer_core.game import CoreGame
from skyflyer.flyer_core.scoring import FeedbackBand
from skyflyer.flyer_core.state import JsonHighScoreStore, MemoryHighScoreStore


@pytest.fixture
def game(config, store):
    game = CoreGame(config=config, seed=42, high_score_store=store)
    game.reset()
    return game


def _drop_obstacle_on_player(game):
    """Place an obstacle that will overlap the hitbox after this frame's motion."""
    state = game.state
    hitbox = state.player.hitbox
    obstacle = Obstacle(
        uid=state.next_uid(),
        x=hitbox.left,
        y=hitbox.top - game.config.obstacle.speed,
        width=game.config.obstacle.width,
        height=game.config.obstacle.height
    )
    state.obstacles.append(obstacle)
    return obstacle


def _drop_coin_on_player(game, tier):
    state = game.state
    hitbox = state.player.hitbox
    coin = Coin(
        uid=state.next_uid(),
        x=hitbox.left,
        y=hitbox.top - game.config.coin.speed,
        width=game.config.coin.width,
        height=game.config.coin.height,
        tier=tier
    )
    state.coins.append(coin)
    return coin


class TestFrame:
    """Test a single frame."""

    def test_time_accrual_without_collisions(self, game):
        expected = 0.0
        for _ in range(100):
            game.step(0.0)
            expected += 0.08
        assert game.state.score == expected
        assert game.score == math.floor(expected)
        assert game.state.frame == 100

    def test_spawns_follow_timestamps(self, game):
        result = game.step(500)
        assert result.spawned == []

        result = game.step(800)
        assert len(result.spawned) == 1
        assert len(game.state.coins) == 1

        result = game.step(950)
        assert len(result.spawned) == 1
        assert len(game.state.obstacles) == 1

    def test_new_entities_move_in_their_first_frame(self, game, config):
        game.step(1000)
        assert game.state.obstacles[0].y == -config.obstacle.height + config.obstacle.speed
        assert game.state.coins[0].y == -config.coin.height + config.coin.speed

    def test_collects_multiple_coins_in_one_frame(self, game):
        uids = {
            _drop_coin_on_player(game, CoinTier.NORMAL).uid,
            _drop_coin_on_player(game, CoinTier.DOUBLE).uid,
            _drop_coin_on_player(game, CoinTier.TRIPLE).uid,
        }

        result = game.step(0.0)

        assert {e.coin_uid for e in result.collected} == uids
        assert set(result.removed) == uids
        assert game.state.coins == []
        assert game.coin_count == 6
        assert game.state.score == pytest.approx(0.08 + 60)
        assert result.delta_score == pytest.approx(60.08)

    def test_badges_follow_displayed_score(self, game):
        game.state.score = 49.95
        result = game.step(0.0)
        assert result.displayed_score == 50
        assert result.badges == ["Star Flyer"]
        assert game.badges == ["Star Flyer"]

    def test_pointer_centres_and_clamps(self, game, config):
        player = game.state.player
        game.move_player(240, 320)
        assert (player.x, player.y) == (240 - player.width / 2, 320 - player.height / 2)

        game.move_player(-500, 10_000)
        assert player.x == 0
        assert player.y == config.arena.height - player.height

        game.move_player(10_000, -500)
        assert player.x == config.arena.width - player.width
        assert player.y == 0


class TestTermination:
    """Test the game-over transition."""

    def test_obstacle_hit_ends_game(self, game):
        obstacle = _drop_obstacle_on_player(game)
        result = game.step(0.0)

        assert result.terminated
        assert result.hit_obstacle == obstacle.uid
        assert not result.running
        assert game.is_over
        assert game.game_over_result is result.game_over
        assert result.game_over.band is FeedbackBand.LOW

    def test_no_mutation_after_game_over(self, game):
        _drop_obstacle_on_player(game)
        game.step(0.0)

        state = game.state
        before = (
            state.score, state.coin_count, state.frame,
            [(o.uid, o.y) for o in state.obstacles],
            [(c.uid, c.y) for c in state.coins],
            state.last_obstacle_spawn, state.last_coin_spawn,
        )

        for t in (1000, 5000, 20000):
            result = game.step(t)
            assert not result.terminated
            assert result.spawned == [] and result.removed == []

        after = (
            state.score, state.coin_count, state.frame,
            [(o.uid, o.y) for o in state.obstacles],
            [(c.uid, c.y) for c in state.coins],
            state.last_obstacle_spawn, state.last_coin_spawn,
        )
        assert before == after

    def test_pointer_ignored_after_game_over(self, game):
        _drop_obstacle_on_player(game)
        game.step(0.0)

        player = game.state.player
        position = (player.x, player.y)
        game.move_player(0, 0)
        assert (player.x, player.y) == position

    def test_coins_not_collected_on_fatal_frame(self, game):
        _drop_obstacle_on_player(game)
        _drop_coin_on_player(game, CoinTier.TRIPLE)

        result = game.step(0.0)

        assert result.terminated
        assert result.collected == []
        assert game.coin_count == 0

    def test_final_score_banding(self, game):
        game.state.score = 149.0
        _drop_obstacle_on_player(game)
        result = game.step(0.0)

        # 149.0 + 0.08 still floors to 149
        assert result.game_over.final_score == 149
        assert result.game_over.band is FeedbackBand.MID

    def test_high_score_saved_on_game_over(self, config):
        store = MemoryHighScoreStore(initial=10)
        game = CoreGame(config=config, seed=1, high_score_store=store)
        assert game.high_score == 10

        game.state.score = 60.0
        _drop_obstacle_on_player(game)
        result = game.step(0.0)

        assert result.game_over.new_high_score
        assert store.load() == 60
        assert game.high_score == 60

    def test_unwritable_store_does_not_abort_frame(self, config, tmp_path, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = JsonHighScoreStore(blocker / "highscore.json")
        game = CoreGame(config=config, seed=1, high_score_store=store)

        game.state.score = 30.0
        _drop_obstacle_on_player(game)
        result = game.step(0.0)

        assert result.terminated
        assert not result.running
        assert game.game_over_result is not None
        assert result.game_over.new_high_score
        assert game.high_score == 30
        assert "Warning: could not save high score" in capsys.readouterr().out


class TestReset:
    """Test restarting."""

    def test_reset_clears_state(self, game):
        game.state.score = 30.0
        _drop_obstacle_on_player(game)
        game.step(0.0)

        state = game.reset(start_time=5000)

        assert state.running
        assert state.score == 0
        assert state.obstacles == [] and state.coins == []
        assert game.game_over_result is None
        assert game.step(5500).spawned == []

    def test_reset_keeps_best_score(self, game, store):
        game.state.score = 80.0
        _drop_obstacle_on_player(game)
        game.step(0.0)

        game.reset()
        assert game.high_score == 80

    def test_same_seed_same_game(self, config):
        runs = []
        for _ in range(2):
            game = CoreGame(config=config, seed=3)
            game.reset()
            for t in range(0, 20_000, 16):
                game.step(float(t))
            runs.append([(o.x, o.y) for o in game.state.obstacles])
        assert runs[0] == runs[1]


class TestRenderData:
    """Test the presentation sink."""

    def test_render_data_contents(self, game):
        _drop_coin_on_player(game, CoinTier.DOUBLE)
        game.state.coins[0].x = 0
        game.step(1000)

        data = game.get_render_data()
        assert data["running"]
        assert data["game_over"] is None
        assert len(data["player"]) == 4 and len(data["hitbox"]) == 4
        assert {c["tier"] for c in data["coins"]} >= {"double"}
        for entity in data["obstacles"] + data["coins"]:
            assert {"uid", "x", "y", "width", "height"} <= set(entity)

    def test_render_data_after_game_over(self, game):
        _drop_obstacle_on_player(game)
        game.step(0.0)

        summary = game.get_render_data()["game_over"]
        assert summary["band"] == "low"
        assert summary["final_score"] == 0
        assert summary["message"]
