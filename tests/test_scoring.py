"""
Tests for score accrual, coins, badges and game over.
"""

import math

import pytest

from skyflyer.flyer_core.entities import Coin, CoinTier
from skyflyer.flyer_core.scoring import FeedbackBand, ScoreTracker


@pytest.fixture
def scorer(config):
    return ScoreTracker(config)


def _coin(tier):
    return Coin(uid=0, x=0, y=0, width=40, height=40, tier=tier)


class TestTimeAccrual:
    """Test per-frame survival score."""

    def test_accumulates_per_frame(self, scorer, state):
        expected = 0.0
        for _ in range(250):
            scorer.accrue_time(state)
            expected += 0.08
        assert state.score == expected
        assert state.score == pytest.approx(0.08 * 250)

    def test_displayed_score_is_floor(self, state):
        for value in (0.0, 0.99, 1.0, 49.999, 150.5):
            state.score = value
            assert state.displayed_score == math.floor(value)


class TestCoins:
    """Test coin collection scoring."""

    @pytest.mark.parametrize("tier,points,coins", [
        (CoinTier.NORMAL, 10, 1),
        (CoinTier.DOUBLE, 20, 2),
        (CoinTier.TRIPLE, 30, 3),
    ])
    def test_tier_values(self, scorer, state, tier, points, coins):
        state.score = 5.0
        event = scorer.apply_coin(state, _coin(tier))

        assert state.score == 5.0 + points
        assert state.coin_count == coins
        assert event.points == points
        assert event.coins == coins


class TestBadges:
    """Test badge derivation."""

    def test_no_badges_below_first_threshold(self, scorer):
        assert scorer.badges_for(49) == []

    def test_threshold_is_inclusive(self, scorer):
        assert scorer.badges_for(50) == ["Star Flyer"]

    def test_badges_in_ascending_order(self, scorer):
        assert scorer.badges_for(100) == ["Star Flyer", "Cloud Skipper"]
        assert scorer.badges_for(1000) == ["Star Flyer", "Cloud Skipper", "Sky Champion"]

    def test_badges_match_thresholds(self, scorer, config):
        for score in range(0, 300, 7):
            expected = [b.label for b in config.badges if b.threshold <= score]
            assert scorer.badges_for(score) == expected


class TestGameOver:
    """Test the termination transition."""

    @pytest.mark.parametrize("final,band", [
        (0, FeedbackBand.LOW),
        (49, FeedbackBand.LOW),
        (50, FeedbackBand.MID),
        (149, FeedbackBand.MID),
        (150, FeedbackBand.HIGH),
        (900, FeedbackBand.HIGH),
    ])
    def test_bands(self, scorer, final, band):
        assert scorer.band_for(final) is band

    def test_end_game_uses_floored_score(self, scorer, state):
        state.score = 49.99
        state.coin_count = 4
        result = scorer.end_game(state)

        assert result.final_score == 49
        assert result.band is FeedbackBand.LOW
        assert result.coin_count == 4
        assert result.message
        assert state.running is False

    def test_end_game_only_once(self, scorer, state):
        state.score = 120.0
        assert scorer.end_game(state) is not None

        state.score = 500.0
        assert scorer.end_game(state) is None
        assert state.high_score == 120
