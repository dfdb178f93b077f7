"""
Shared fixtures.
"""

import pytest

from skyflyer.flyer_core.config_loader import load_config
from skyflyer.flyer_core.state import GameState, MemoryHighScoreStore


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def store(config):
    return MemoryHighScoreStore(config.persistence.key)


@pytest.fixture
def state(config, store):
    return GameState.new(config, store)
