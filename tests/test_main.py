from __future__ import annotations

from pathlib import Path

from nardis.main import simulate
from nardis.settings import NardisSettings


def test_simulation_plays_the_configured_turns(tmp_path: Path) -> None:
    settings = NardisSettings(
        database_url=f"sqlite:///{tmp_path}/nardis.db",
        simulation_turns=3,
        rng_seed=42,
    )

    game = simulate(settings)

    assert game.turn == 4
    assert game.storage.has_active_game()


def test_simulation_resumes_a_saved_game(tmp_path: Path) -> None:
    settings = NardisSettings(
        database_url=f"sqlite:///{tmp_path}/nardis.db",
        simulation_turns=2,
        rng_seed=42,
    )
    first = simulate(settings)

    second = simulate(settings)

    assert second.turn == 5
    assert [player.id for player in second.players] == [
        player.id for player in first.players
    ]
