"""Test configuration and fixtures for the simulation test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from nardis.game_logic.configuration import get_default_game_configuration
from nardis.game_logic.generator import WorldGenerator
from nardis.game_logic.state import GameData
from nardis.settings import get_settings
from nardis.shared.rng import RandomService


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure settings are loaded with predictable values during tests."""
    monkeypatch.setenv("NARDIS_DATABASE_URL", "sqlite://")
    monkeypatch.setenv("NARDIS_LOG_ENABLED", "false")
    get_settings.cache_clear()
    get_default_game_configuration.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_game_configuration.cache_clear()


@pytest.fixture
def rng() -> RandomService:
    """Return a seeded random service so rolls are reproducible."""
    return RandomService(seed=1234)


@pytest.fixture
def world(rng: RandomService) -> GameData:
    """Return a freshly generated world able to seat four players."""
    return WorldGenerator(rng).generate(players=4)
