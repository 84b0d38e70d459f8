"""Builders for hand-made worlds used across the game logic tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from nardis.game_logic.city import City, CityResource
from nardis.game_logic.equipment import Train
from nardis.game_logic.resource import Resource
from nardis.shared.enums import ResourceTier
from nardis.shared.value_objects import Coordinate

CityFactory = Callable[..., City]


@pytest.fixture
def passengers() -> Resource:
    return Resource(
        id="passengers",
        name="passengers",
        tier=ResourceTier.LOW,
        weight=1,
        value=10,
        min_value=5,
        max_value=15,
        value_volatility=0.5,
    )


@pytest.fixture
def mail() -> Resource:
    return Resource(
        id="mail",
        name="mail",
        tier=ResourceTier.LOW,
        weight=1,
        value=12,
        min_value=5,
        max_value=15,
        value_volatility=0.5,
    )


@pytest.fixture
def coal() -> Resource:
    return Resource(
        id="coal",
        name="coal",
        tier=ResourceTier.MEDIUM,
        weight=4,
        value=50,
        min_value=45,
        max_value=85,
        value_volatility=0.4,
    )


@pytest.fixture
def medicine() -> Resource:
    return Resource(
        id="medicine",
        name="medicine",
        tier=ResourceTier.HIGH,
        weight=5,
        value=100,
        min_value=86,
        max_value=200,
        value_volatility=0.3,
    )


@pytest.fixture
def resources(
    passengers: Resource, mail: Resource, coal: Resource, medicine: Resource
) -> list[Resource]:
    return [passengers, mail, coal, medicine]


@pytest.fixture
def make_city() -> CityFactory:
    def _make_city(
        identifier: str,
        latitude: float,
        longitude: float,
        *,
        size: int = 2,
        supply: list[CityResource] | None = None,
        demand: list[CityResource] | None = None,
        growth_rate: float = 0.1,
        supply_refill_rate: int = 2,
    ) -> City:
        return City(
            id=identifier,
            name=identifier.capitalize(),
            size=size,
            coords=Coordinate(latitude=latitude, longitude=longitude),
            supply=supply or [],
            demand=demand or [],
            growth_rate=growth_rate,
            supply_refill_rate=supply_refill_rate,
        )

    return _make_city


@pytest.fixture
def train() -> Train:
    return Train(id="train", name="Puffer", cost=100, upkeep=4, speed=50, cargo_space=4)


@pytest.fixture
def york(
    make_city: CityFactory, passengers: Resource, mail: Resource, coal: Resource
) -> City:
    return make_city(
        "york",
        54.4863,
        0.6133,
        supply=[
            CityResource(resource=passengers, amount=6, available=6),
            CityResource(resource=mail, amount=6, available=6),
        ],
        demand=[CityResource.demanded(coal)],
    )


@pytest.fixture
def carlisle(
    make_city: CityFactory, coal: Resource, passengers: Resource, mail: Resource
) -> City:
    return make_city(
        "carlisle",
        54.88,
        -2.93,
        supply=[CityResource(resource=coal, amount=8, available=8)],
        demand=[CityResource.demanded(passengers), CityResource.demanded(mail)],
    )
