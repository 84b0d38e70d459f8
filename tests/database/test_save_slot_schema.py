"""Database schema and store specific tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

import pytest

if TYPE_CHECKING:
    from sqlalchemy import Table

from nardis.database import (
    DatabaseKeyValueStore,
    DatabaseService,
    SaveSlotRepository,
    SaveSlotSchema,
)
from nardis.game_logic.game import Nardis
from nardis.game_logic.persistence import GameStorage, StorageKey
from nardis.shared.rng import RandomService


@pytest.fixture
def database() -> DatabaseService:
    service = DatabaseService("sqlite://")
    service.create_schema()
    return service


def test_save_slot_key_fits_storage_keys() -> None:
    table = cast("Table", SaveSlotSchema.__table__)

    assert table.c.key.primary_key
    assert all(len(key.value) <= table.c.key.type.length for key in StorageKey)


def test_repository_upserts_and_deletes(database: DatabaseService) -> None:
    with database.session() as session:
        repository = SaveSlotRepository(session)
        repository.upsert("b", "first")
        repository.upsert("a", "value")
        repository.upsert("b", "second")

    with database.session() as session:
        repository = SaveSlotRepository(session)
        assert repository.list_keys() == ["a", "b"]
        assert repository.get_by_key("b").value == "second"
        assert repository.delete("a")
        assert not repository.delete("a")


def test_store_round_trips_values(database: DatabaseService) -> None:
    store = DatabaseKeyValueStore(database)

    store.save("slot", "payload")
    assert store.load("slot") == "payload"

    store.remove("slot")
    assert store.load("slot") is None


def test_game_can_be_resumed_from_the_database(database: DatabaseService) -> None:
    storage = GameStorage(DatabaseKeyValueStore(database))
    game = Nardis.create_from_player("Ada", rng=RandomService(seed=5), storage=storage)
    game.end_turn()
    game.end_turn()

    restored = Nardis.create_from_storage(GameStorage(DatabaseKeyValueStore(database)))

    assert restored.turn == 3
    assert [player.name for player in restored.players] == [
        player.name for player in game.players
    ]
