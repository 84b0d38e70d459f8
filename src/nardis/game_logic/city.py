"""Cities with supply and demand baskets that grow over time."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from nardis.game_logic.catalog import (
    CITY_GROWTH_DECISION_TARGET,
    MAP_RADIUS_IN_KILOMETERS,
    MAX_CITY_SIZE,
    MAX_CONCURRENT_ROUTES_PER_SIZE,
    MAX_START_CITY_SIZE,
    RESOURCE_AMOUNT_PER_SIZE,
    RESOURCES_PER_SIZE,
)
from nardis.game_logic.errors import ResourcePoolExhaustedError
from nardis.game_logic.interfaces import resolve_by_id
from nardis.game_logic.resource import Resource  # noqa: TC001
from nardis.shared.value_objects import Coordinate, round_half_up

if TYPE_CHECKING:
    from nardis.game_logic.state import TurnContext
    from nardis.shared.rng import RandomService

logger = logging.getLogger(__name__)

DEMAND_SENTINEL = -1


class CityResource(BaseModel):
    """A resource entry in a city basket.

    Demand entries carry :data:`DEMAND_SENTINEL` for both counters since
    demand is never stock limited.
    """

    resource: Resource
    amount: int
    available: int

    @classmethod
    def demanded(cls, resource: Resource) -> CityResource:
        """Return an unbounded demand entry for *resource*."""
        return cls(resource=resource, amount=DEMAND_SENTINEL, available=DEMAND_SENTINEL)


class CityResourceRecord(BaseModel):
    """Serialized basket entry referencing its resource by id."""

    resource_id: str
    amount: int
    available: int


class CityRecord(BaseModel):
    """Canonical serialized form of a :class:`City`."""

    id: str
    name: str
    size: int
    coords: Coordinate
    supply: list[CityResourceRecord]
    demand: list[CityResourceRecord]
    growth_rate: float
    supply_refill_rate: int
    growth_change_decider: float
    supply_refill_decider: int
    max_concurrent_routes: int
    current_route_count: int
    is_start_city: bool


def max_routes_for_size(size: int) -> int:
    """Return how many routes may touch a city of *size* simultaneously."""
    return MAX_CONCURRENT_ROUTES_PER_SIZE.get(size, 0)


class City(BaseModel):
    """A trading post with a growth cycle and a supply refill cycle.

    Growth and refill are driven by two independent accumulators. A city
    that grows gains route capacity and rolls fresh resources into both
    baskets; supply and demand never share a resource.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    size: int = Field(..., ge=1, le=MAX_CITY_SIZE)
    coords: Coordinate
    supply: list[CityResource] = Field(default_factory=list)
    demand: list[CityResource] = Field(default_factory=list)
    growth_rate: float = Field(..., ge=0)
    supply_refill_rate: int = Field(..., ge=0)
    growth_change_decider: float = 0
    supply_refill_decider: int = 0
    max_concurrent_routes: int | None = None
    current_route_count: int = Field(default=0, ge=0)
    is_start_city: bool | None = None

    @model_validator(mode="after")
    def _derive_state(self) -> City:
        """Derive capacity flags and validate basket membership."""
        if self.max_concurrent_routes is None:
            self.max_concurrent_routes = max_routes_for_size(self.size)
        if self.is_start_city is None:
            self.is_start_city = self.size <= MAX_START_CITY_SIZE
        supplied = {entry.resource.id for entry in self.supply}
        if supplied & {entry.resource.id for entry in self.demand}:
            msg = f"City {self.name} both supplies and demands the same resource."
            raise ValueError(msg)
        return self

    def equals(self, other: object) -> bool:
        """Return ``True`` when *other* is the same city."""
        return getattr(other, "id", None) == self.id

    def handle_turn(self, context: TurnContext) -> None:
        """Advance the growth and refill accumulators by one turn."""
        if self.growth_change_decider >= CITY_GROWTH_DECISION_TARGET and self._grow(
            context.data.resources, context.rng
        ):
            self.growth_change_decider = 0
        else:
            self.growth_change_decider += self.growth_rate

        if self.supply_refill_decider >= self.supply_refill_rate:
            self._refill_supply()
            self.supply_refill_decider = 0
        else:
            self.supply_refill_decider += 1

    def is_full(self) -> bool:
        """Return ``True`` when no further route may touch the city."""
        return self.current_route_count >= (self.max_concurrent_routes or 0)

    def increment_route_count(self) -> bool:
        """Register a route touching the city unless it is at capacity."""
        if self.is_full():
            return False
        self.current_route_count += 1
        return True

    def decrement_route_count(self) -> bool:
        """Release a route slot if any is in use."""
        if self.current_route_count < 1:
            return False
        self.current_route_count -= 1
        return True

    def supply_entry(self, resource: Resource) -> CityResource | None:
        """Return the supply entry for *resource* if the city produces it."""
        for entry in self.supply:
            if entry.resource.id == resource.id:
                return entry
        return None

    def is_supply(self, resource: Resource) -> bool:
        """Return ``True`` when the city supplies *resource*."""
        return self.supply_entry(resource) is not None

    def is_demand(self, resource: Resource) -> bool:
        """Return ``True`` when the city demands *resource*."""
        return any(entry.resource.id == resource.id for entry in self.demand)

    def subtract_supply(self, resource: Resource, amount: int) -> bool:
        """Remove *amount* units of *resource* from the available supply."""
        entry = self.supply_entry(resource)
        if entry is None or entry.available < amount:
            return False
        entry.available -= amount
        return True

    def distance_to(self, other: City) -> int:
        """Return the great-circle distance to *other* in whole kilometres.

        The distance from a city to itself is reported as ``-1``.
        """
        if other.id == self.id:
            return -1
        phi_one = math.radians(self.coords.latitude)
        phi_two = math.radians(other.coords.latitude)
        delta_phi = phi_two - phi_one
        delta_lambda = math.radians(other.coords.longitude - self.coords.longitude)
        haversine = (
            math.sin(delta_phi / 2) ** 2
            + math.cos(phi_one) * math.cos(phi_two) * math.sin(delta_lambda / 2) ** 2
        )
        arc = 2 * math.atan2(math.sqrt(haversine), math.sqrt(1 - haversine))
        return round_half_up(MAP_RADIUS_IN_KILOMETERS * arc)

    def roll_new_resource(
        self,
        resources: Sequence[Resource],
        rng: RandomService,
        *,
        demand: bool = False,
    ) -> CityResource:
        """Pick a resource the city neither supplies nor demands yet."""
        taken = {entry.resource.id for entry in (*self.supply, *self.demand)}
        candidates = [resource for resource in resources if resource.id not in taken]
        if not candidates:
            msg = f"No resource left to add to the baskets of city {self.name}."
            raise ResourcePoolExhaustedError(msg)
        resource = rng.choice(candidates)
        if demand:
            return CityResource.demanded(resource)
        amount = rng.random_in_range(RESOURCE_AMOUNT_PER_SIZE[self.size - 1])
        return CityResource(resource=resource, amount=amount, available=amount)

    def _grow(self, resources: Sequence[Resource], rng: RandomService) -> bool:
        if self.size >= MAX_CITY_SIZE or rng.random_number() > 5:
            return False
        self.size += 1
        self.max_concurrent_routes = max_routes_for_size(self.size)
        ceiling = RESOURCES_PER_SIZE[self.size - 1]
        while len(self.supply) < ceiling:
            self.supply.append(self.roll_new_resource(resources, rng))
        while len(self.demand) < ceiling:
            self.demand.append(self.roll_new_resource(resources, rng, demand=True))
        logger.debug("City %s grew to size %d", self.name, self.size)
        return True

    def _refill_supply(self) -> None:
        for entry in self.supply:
            entry.available = entry.amount

    def deconstruct(self) -> str:
        """Return the JSON record describing this city."""
        return CityRecord(
            id=self.id,
            name=self.name,
            size=self.size,
            coords=self.coords,
            supply=[_basket_record(entry) for entry in self.supply],
            demand=[_basket_record(entry) for entry in self.demand],
            growth_rate=self.growth_rate,
            supply_refill_rate=self.supply_refill_rate,
            growth_change_decider=self.growth_change_decider,
            supply_refill_decider=self.supply_refill_decider,
            max_concurrent_routes=self.max_concurrent_routes or 0,
            current_route_count=self.current_route_count,
            is_start_city=bool(self.is_start_city),
        ).model_dump_json()

    @classmethod
    def from_json(cls, raw: str, resources: Sequence[Resource]) -> City:
        """Rebuild a city, resolving basket resources against *resources*."""
        record = CityRecord.model_validate_json(raw)

        def basket(entries: list[CityResourceRecord]) -> list[CityResource]:
            return [
                CityResource(
                    resource=resolve_by_id(resources, entry.resource_id, "resource"),
                    amount=entry.amount,
                    available=entry.available,
                )
                for entry in entries
            ]

        return cls(
            id=record.id,
            name=record.name,
            size=record.size,
            coords=record.coords,
            supply=basket(record.supply),
            demand=basket(record.demand),
            growth_rate=record.growth_rate,
            supply_refill_rate=record.supply_refill_rate,
            growth_change_decider=record.growth_change_decider,
            supply_refill_decider=record.supply_refill_decider,
            max_concurrent_routes=record.max_concurrent_routes,
            current_route_count=record.current_route_count,
            is_start_city=record.is_start_city,
        )


def _basket_record(entry: CityResource) -> CityResourceRecord:
    return CityResourceRecord(
        resource_id=entry.resource.id,
        amount=entry.amount,
        available=entry.available,
    )


__all__ = [
    "DEMAND_SENTINEL",
    "City",
    "CityRecord",
    "CityResource",
    "CityResourceRecord",
    "max_routes_for_size",
]
