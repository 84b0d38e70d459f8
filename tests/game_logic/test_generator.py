from __future__ import annotations

import pytest

from nardis.game_logic.catalog import (
    CITY_COORDINATES,
    RESOURCE_CATALOG,
    RESOURCES_PER_SIZE,
    TRAIN_CATALOG,
    UPGRADE_CATALOG,
)
from nardis.game_logic.errors import InsufficientStartCitiesError
from nardis.game_logic.generator import WorldGenerator, ensure_start_cities
from nardis.game_logic.state import GameData
from nardis.shared.enums import ResourceTier
from nardis.shared.rng import RandomService


def test_world_contains_every_catalog_entry(world: GameData) -> None:
    assert len(world.resources) == len(RESOURCE_CATALOG)
    assert len(world.cities) == len(CITY_COORDINATES)
    assert len(world.trains) == len(TRAIN_CATALOG)
    assert len(world.upgrades) == len(UPGRADE_CATALOG)


def test_rolled_resources_respect_their_bounds(world: GameData) -> None:
    for resource in world.resources:
        assert resource.min_value <= resource.value <= resource.max_value
        assert 0 < resource.value_volatility <= 1


def test_city_baskets_match_size_and_stay_disjoint(world: GameData) -> None:
    low = {
        resource.id for resource in world.resources if resource.tier is ResourceTier.LOW
    }
    for city in world.cities:
        supplied = {entry.resource.id for entry in city.supply}
        demanded = {entry.resource.id for entry in city.demand}
        assert len(city.supply) == RESOURCES_PER_SIZE[city.size - 1]
        assert len(city.demand) == RESOURCES_PER_SIZE[city.size - 1]
        assert low <= supplied
        assert supplied.isdisjoint(demanded)
        assert demanded.isdisjoint(low)


def test_every_coordinate_is_used_once(world: GameData) -> None:
    assert {city.coords for city in world.cities} == set(CITY_COORDINATES)


def test_names_are_unique_across_cities_and_trains(world: GameData) -> None:
    names = [city.name for city in world.cities] + [
        train.name for train in world.trains
    ]

    assert len(names) == len(set(names))


def test_trains_follow_catalog_ranges(world: GameData) -> None:
    for train, blueprint in zip(world.trains, TRAIN_CATALOG, strict=True):
        assert blueprint.cost[0] <= train.cost <= blueprint.cost[1]
        assert blueprint.speed[0] <= train.speed <= blueprint.speed[1]
        assert train.level_required is blueprint.level_required


def test_same_seed_generates_the_same_world() -> None:
    first = WorldGenerator(RandomService(seed=99)).generate()
    second = WorldGenerator(RandomService(seed=99)).generate()

    assert [city.name for city in first.cities] == [
        city.name for city in second.cities
    ]
    assert [city.size for city in first.cities] == [
        city.size for city in second.cities
    ]


def test_excluded_names_are_never_generated() -> None:
    excluded: list[str] = []
    world = WorldGenerator(RandomService(seed=4), excluded).generate()

    assert set(excluded) >= {city.name for city in world.cities}


def test_too_many_players_for_the_start_cities(world: GameData) -> None:
    available = len(world.start_cities())

    with pytest.raises(InsufficientStartCitiesError) as error:
        ensure_start_cities(world, available + 1)

    assert error.value.required == available + 1
