"""Nardis simulation entrypoint."""

from __future__ import annotations

import logging

from nardis.database import DatabaseKeyValueStore, DatabaseService
from nardis.game_logic import GameStorage, Nardis
from nardis.settings import NardisSettings, get_settings
from nardis.shared.rng import RandomService

logger = logging.getLogger(__name__)


def _open_storage(settings: NardisSettings) -> GameStorage:
    """Return storage backed by the configured database."""
    database = DatabaseService(settings=settings)
    database.create_schema()
    return GameStorage(DatabaseKeyValueStore(database))


def simulate(settings: NardisSettings | None = None) -> Nardis:
    """Resume or create a game and play the configured number of turns."""
    settings = settings or get_settings()
    logging_config = settings.logging_configuration()
    storage = _open_storage(settings)
    rng = RandomService(settings.rng_seed)
    if storage.has_active_game():
        game = Nardis.create_from_storage(
            storage, rng=rng, logging_config=logging_config
        )
    else:
        game = Nardis.create_from_player(
            settings.player_name,
            rng=rng,
            storage=storage,
            logging_config=logging_config,
        )
    for _ in range(settings.simulation_turns):
        game.end_turn()
        status = game.get_game_status()
        if status.game_over:
            game.clear_storage()
            break
    standings = sorted(
        game.players, key=lambda player: player.ledger.net_worth or 0, reverse=True
    )
    for player in standings:
        logger.info(
            "%s: net worth %s, gold %s",
            player.name,
            player.ledger.net_worth,
            player.ledger.gold,
        )
    return game


def run() -> None:
    """Run the simulation with settings loaded from the environment."""
    simulate()


__all__ = ["run", "simulate"]
