"""Random world generation for a new game."""

from __future__ import annotations

import logging
from collections.abc import MutableSequence, Sequence  # noqa: TC003

from nardis.game_logic.catalog import (
    CITY_COORDINATES,
    CITY_NAME_LENGTH,
    CITY_SIZES,
    RESOURCE_AMOUNT_PER_SIZE,
    RESOURCE_CATALOG,
    RESOURCES_PER_SIZE,
    TRAIN_CATALOG,
    TRAIN_NAME_LENGTH,
    UPGRADE_CATALOG,
)
from nardis.game_logic.city import City, CityResource
from nardis.game_logic.equipment import Train, Upgrade
from nardis.game_logic.errors import (
    InsufficientStartCitiesError,
    ResourcePoolExhaustedError,
)
from nardis.game_logic.resource import Resource
from nardis.game_logic.state import GameData
from nardis.shared.enums import ResourceTier
from nardis.shared.rng import RandomService

logger = logging.getLogger(__name__)

# Smallest city size whose baskets may contain high-yield goods.
HIGH_YIELD_CITY_SIZE = 5


class WorldGenerator:
    """Builds the resources, cities, trains and upgrades of a fresh world.

    Names are unique across the whole world: every generated name is added
    to a shared exclusion list, which the caller may pre-populate.
    """

    def __init__(
        self,
        rng: RandomService | None = None,
        excluded_names: MutableSequence[str] | None = None,
    ) -> None:
        self._rng = rng or RandomService()
        self._excluded = excluded_names if excluded_names is not None else []

    @property
    def rng(self) -> RandomService:
        """Return the random service driving generation."""
        return self._rng

    def generate(self, players: int = 1) -> GameData:
        """Return a world with at least *players* start cities."""
        resources = self.generate_resources()
        data = GameData(
            resources=resources,
            cities=self.generate_cities(resources),
            trains=self.generate_trains(),
            upgrades=self.generate_upgrades(),
        )
        ensure_start_cities(data, players)
        logger.debug(
            "Generated %d cities, %d resources, %d trains and %d upgrades",
            len(data.cities),
            len(data.resources),
            len(data.trains),
            len(data.upgrades),
        )
        return data

    def generate_resources(self) -> list[Resource]:
        """Roll every catalog resource within its declared ranges."""
        return [
            Resource(
                id=self._rng.create_id(),
                name=blueprint.name,
                tier=blueprint.tier,
                weight=blueprint.weight,
                value=self._rng.random_in_range(blueprint.value),
                min_value=blueprint.min_value,
                max_value=blueprint.max_value,
                value_volatility=self._rng.random_in_range(blueprint.value_volatility)
                / 10,
            )
            for blueprint in RESOURCE_CATALOG
        ]

    def generate_cities(self, resources: Sequence[Resource]) -> list[City]:
        """Place one city on every coordinate slot with a random size."""
        coordinates = list(CITY_COORDINATES)
        sizes = list(CITY_SIZES)
        names = self._rng.generate_names(
            len(coordinates), *CITY_NAME_LENGTH, self._excluded
        )
        cities: list[City] = []
        for name in names:
            coords = self._rng.pop_random(coordinates)
            size = self._rng.pop_random(sizes)
            supply = self.roll_supply(resources, size)
            cities.append(
                City(
                    id=self._rng.create_id(),
                    name=name,
                    size=size,
                    coords=coords,
                    supply=supply,
                    demand=self.roll_demand(resources, size, supply),
                    growth_rate=self._rng.random_number(1, 6) / 10,
                    supply_refill_rate=self._rng.random_number(2, 4),
                )
            )
        return cities

    def roll_supply(
        self, resources: Sequence[Resource], size: int
    ) -> list[CityResource]:
        """Return a supply basket holding both low-yield goods plus rolled ones."""
        supply = [
            self._supply_entry(resource, size)
            for resource in resources
            if resource.tier is ResourceTier.LOW
        ]
        while len(supply) < RESOURCES_PER_SIZE[size - 1]:
            resource = self._roll_resource(resources, size, supply)
            supply.append(self._supply_entry(resource, size))
        return supply

    def roll_demand(
        self,
        resources: Sequence[Resource],
        size: int,
        supply: Sequence[CityResource],
    ) -> list[CityResource]:
        """Return a demand basket disjoint from *supply*."""
        demand: list[CityResource] = []
        while len(demand) < RESOURCES_PER_SIZE[size - 1]:
            resource = self._roll_resource(resources, size, [*supply, *demand])
            demand.append(CityResource.demanded(resource))
        return demand

    def generate_trains(self) -> list[Train]:
        """Roll every catalog train within its declared ranges."""
        names = self._rng.generate_names(
            len(TRAIN_CATALOG), *TRAIN_NAME_LENGTH, self._excluded
        )
        return [
            Train(
                id=self._rng.create_id(),
                name=name,
                cost=self._rng.random_in_range(blueprint.cost),
                upkeep=self._rng.random_in_range(blueprint.upkeep),
                speed=self._rng.random_in_range(blueprint.speed),
                cargo_space=self._rng.random_in_range(blueprint.cargo_space),
                level_required=blueprint.level_required,
            )
            for name, blueprint in zip(names, TRAIN_CATALOG, strict=True)
        ]

    def generate_upgrades(self) -> list[Upgrade]:
        """Instantiate the fixed upgrade catalog."""
        return [
            Upgrade(
                id=self._rng.create_id(),
                name=blueprint.name,
                cost=blueprint.cost,
                value=blueprint.value,
                type=blueprint.type,
                level_required=blueprint.level_required,
            )
            for blueprint in UPGRADE_CATALOG
        ]

    def _supply_entry(self, resource: Resource, size: int) -> CityResource:
        amount = self._rng.random_in_range(RESOURCE_AMOUNT_PER_SIZE[size - 1])
        return CityResource(resource=resource, amount=amount, available=amount)

    def _roll_resource(
        self,
        resources: Sequence[Resource],
        size: int,
        taken: Sequence[CityResource],
    ) -> Resource:
        taken_ids = {entry.resource.id for entry in taken}
        high = size >= HIGH_YIELD_CITY_SIZE and self._rng.random_number() <= size
        preferred, fallback = (
            (ResourceTier.HIGH, ResourceTier.MEDIUM)
            if high
            else (ResourceTier.MEDIUM, ResourceTier.HIGH)
        )
        for tier in (preferred, fallback):
            candidates = [
                resource
                for resource in resources
                if resource.tier is tier and resource.id not in taken_ids
            ]
            if candidates:
                return self._rng.choice(candidates)
        msg = f"No medium or high yield resource left for a city of size {size}."
        raise ResourcePoolExhaustedError(msg)


def ensure_start_cities(data: GameData, players: int) -> list[City]:
    """Return the start cities of *data*, failing when too few exist."""
    start_cities = data.start_cities()
    if len(start_cities) < players:
        raise InsufficientStartCitiesError(len(start_cities), players)
    return start_cities


def generate_world(rng: RandomService | None = None, players: int = 1) -> GameData:
    """Generate a world able to seat *players* players."""
    return WorldGenerator(rng).generate(players)


__all__ = [
    "HIGH_YIELD_CITY_SIZE",
    "WorldGenerator",
    "ensure_start_cities",
    "generate_world",
]
