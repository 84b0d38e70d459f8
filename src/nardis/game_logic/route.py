"""Trade routes shuttling a train between two cities."""

from __future__ import annotations

import math
from collections.abc import Sequence  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from nardis.game_logic.city import City  # noqa: TC001
from nardis.game_logic.equipment import Train, Upgrade  # noqa: TC001
from nardis.game_logic.errors import RouteCargoError
from nardis.game_logic.interfaces import resolve_by_id
from nardis.game_logic.resource import Resource  # noqa: TC001
from nardis.shared.enums import UpgradeType

if TYPE_CHECKING:
    from nardis.game_logic.state import TurnContext


class RouteCargo(BaseModel):
    """Planned and loaded amount of a resource on one leg of a route."""

    resource: Resource
    target_amount: int = Field(..., ge=0)
    actual_amount: int = Field(default=0, ge=0)


class RoutePlanCargo(BaseModel):
    """Cargo plan for both departure cities of a route."""

    city_one: list[RouteCargo] = Field(default_factory=list)
    city_two: list[RouteCargo] = Field(default_factory=list)


class RouteState(BaseModel):
    """Current leg of a route: where it is heading and what it carries."""

    has_arrived: bool = False
    destination: City
    distance: int
    cargo: list[RouteCargo] = Field(default_factory=list)


class RouteCargoRecord(BaseModel):
    """Serialized cargo entry referencing its resource by id."""

    resource_id: str
    target_amount: int
    actual_amount: int


class RoutePlanRecord(BaseModel):
    """Serialized cargo plan."""

    city_one: list[RouteCargoRecord]
    city_two: list[RouteCargoRecord]


class RouteStateRecord(BaseModel):
    """Serialized leg state referencing the destination by id."""

    has_arrived: bool
    destination_id: str
    distance: int
    cargo: list[RouteCargoRecord]


class RouteRecord(BaseModel):
    """Canonical serialized form of a :class:`Route`."""

    id: str
    name: str
    city_one_id: str
    city_two_id: str
    train_id: str
    route_plan_cargo: RoutePlanRecord
    distance: int
    cost: int
    purchased_on_turn: int
    route_state: RouteStateRecord
    profit: int
    kilometers_travelled: int


def effective_speed(train: Train, upgrades: Sequence[Upgrade]) -> int:
    """Return the train speed with every speed upgrade applied in sequence."""
    speed = train.speed
    for upgrade in upgrades:
        if upgrade.type is UpgradeType.TRAIN_SPEED_QUICKER:
            speed += math.floor(speed * upgrade.value)
    return speed


class Route(BaseModel):
    """A two-leg shuttle between ``city_one`` and ``city_two``.

    The route starts heading towards ``city_two`` with cargo loaded from
    ``city_one``. Each turn the train closes in on its destination; once it
    arrives the owning finance settles the delivery and the following turn
    the train turns around with freshly loaded cargo.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str = ""
    city_one: City
    city_two: City
    train: Train
    route_plan_cargo: RoutePlanCargo
    distance: int = Field(..., ge=0)
    cost: int = Field(..., ge=0)
    purchased_on_turn: int = Field(..., ge=0)
    route_state: RouteState | None = None
    profit: int = 0
    kilometers_travelled: int = 0

    @model_validator(mode="after")
    def _initialise_state(self) -> Route:
        """Prepare a departing leg for freshly created routes."""
        if not self.name:
            self.name = f"{self.city_one.name} <-> {self.city_two.name}"
        if self.route_state is None:
            self.reset_route_state()
        return self

    @property
    def state(self) -> RouteState:
        """Return the current leg state."""
        if self.route_state is None:
            self.reset_route_state()
        return self.route_state  # type: ignore[return-value]

    def equals(self, other: object) -> bool:
        """Return ``True`` when *other* is the same route."""
        return getattr(other, "id", None) == self.id

    def handle_turn(
        self, context: TurnContext, upgrades: Sequence[Upgrade] = ()
    ) -> None:
        """Advance the train, turning around after an observed arrival."""
        state = self.state
        if state.has_arrived:
            state.destination = self._origin()
            state.distance = self.distance
            state.cargo = self.get_changed_cargo()
            state.has_arrived = False
            return
        speed = effective_speed(self.train, upgrades)
        self.kilometers_travelled += speed
        state.distance -= speed
        if state.distance <= 0:
            state.has_arrived = True

    def get_changed_cargo(self) -> list[RouteCargo]:
        """Load cargo for the leg leaving the city opposite the destination."""
        origin = self._origin()
        plan = (
            self.route_plan_cargo.city_one
            if origin.id == self.city_one.id
            else self.route_plan_cargo.city_two
        )
        cargo: list[RouteCargo] = []
        for item in plan:
            entry = origin.supply_entry(item.resource)
            if entry is None:
                msg = (
                    f"Route {self.name} plans to load {item.resource.name} "
                    f"which {origin.name} does not supply."
                )
                raise RouteCargoError(msg)
            loaded = max(0, min(entry.available, item.target_amount))
            origin.subtract_supply(item.resource, loaded)
            cargo.append(
                RouteCargo(
                    resource=item.resource,
                    target_amount=item.target_amount,
                    actual_amount=loaded,
                )
            )
        return cargo

    def reset_route_state(self) -> None:
        """Start a fresh leg departing ``city_one`` towards ``city_two``."""
        self.route_state = RouteState(destination=self.city_two, distance=self.distance)
        self.route_state.cargo = self.get_changed_cargo()

    def change(self, train: Train, route_plan: RoutePlanCargo) -> None:
        """Swap the train and cargo plan, restarting from ``city_one``."""
        if train.id != self.train.id:
            self.profit = 0
            self.kilometers_travelled = 0
        self.train = train
        self.route_plan_cargo = route_plan
        self.reset_route_state()

    def add_to_profit(self, value: int) -> None:
        """Credit delivery income to the route."""
        self.profit += value

    def subtract_from_profit(self, value: int) -> None:
        """Debit running costs from the route."""
        self.profit -= value

    def turns_per_leg(self) -> int:
        """Return how many turns the train needs to cover the route once."""
        return math.ceil(self.distance / self.train.speed)

    def revolution_turns(self) -> int:
        """Return the turns needed for a full outbound and inbound cycle."""
        return self.turns_per_leg() * 2

    def _origin(self) -> City:
        if self.state.destination.id == self.city_one.id:
            return self.city_two
        return self.city_one

    def deconstruct(self) -> str:
        """Return the JSON record describing this route."""
        return self.to_record().model_dump_json()

    def to_record(self) -> RouteRecord:
        """Return the canonical record describing this route."""
        state = self.state
        return RouteRecord(
            id=self.id,
            name=self.name,
            city_one_id=self.city_one.id,
            city_two_id=self.city_two.id,
            train_id=self.train.id,
            route_plan_cargo=RoutePlanRecord(
                city_one=_cargo_records(self.route_plan_cargo.city_one),
                city_two=_cargo_records(self.route_plan_cargo.city_two),
            ),
            distance=self.distance,
            cost=self.cost,
            purchased_on_turn=self.purchased_on_turn,
            route_state=RouteStateRecord(
                has_arrived=state.has_arrived,
                destination_id=state.destination.id,
                distance=state.distance,
                cargo=_cargo_records(state.cargo),
            ),
            profit=self.profit,
            kilometers_travelled=self.kilometers_travelled,
        )

    @classmethod
    def from_json(
        cls,
        raw: str,
        cities: Sequence[City],
        trains: Sequence[Train],
        resources: Sequence[Resource],
    ) -> Route:
        """Rebuild a route, resolving references against the world collections."""
        record = RouteRecord.model_validate_json(raw)
        return cls.from_record(record, cities, trains, resources)

    @classmethod
    def from_record(
        cls,
        record: RouteRecord,
        cities: Sequence[City],
        trains: Sequence[Train],
        resources: Sequence[Resource],
    ) -> Route:
        """Rebuild a route from an already parsed record."""

        def cargo(entries: list[RouteCargoRecord]) -> list[RouteCargo]:
            return [
                RouteCargo(
                    resource=resolve_by_id(resources, entry.resource_id, "resource"),
                    target_amount=entry.target_amount,
                    actual_amount=entry.actual_amount,
                )
                for entry in entries
            ]

        return cls(
            id=record.id,
            name=record.name,
            city_one=resolve_by_id(cities, record.city_one_id, "city"),
            city_two=resolve_by_id(cities, record.city_two_id, "city"),
            train=resolve_by_id(trains, record.train_id, "train"),
            route_plan_cargo=RoutePlanCargo(
                city_one=cargo(record.route_plan_cargo.city_one),
                city_two=cargo(record.route_plan_cargo.city_two),
            ),
            distance=record.distance,
            cost=record.cost,
            purchased_on_turn=record.purchased_on_turn,
            route_state=RouteState(
                has_arrived=record.route_state.has_arrived,
                destination=resolve_by_id(
                    cities, record.route_state.destination_id, "city"
                ),
                distance=record.route_state.distance,
                cargo=cargo(record.route_state.cargo),
            ),
            profit=record.profit,
            kilometers_travelled=record.kilometers_travelled,
        )


def _cargo_records(entries: Sequence[RouteCargo]) -> list[RouteCargoRecord]:
    return [
        RouteCargoRecord(
            resource_id=entry.resource.id,
            target_amount=entry.target_amount,
            actual_amount=entry.actual_amount,
        )
        for entry in entries
    ]


__all__ = [
    "Route",
    "RouteCargo",
    "RouteCargoRecord",
    "RoutePlanCargo",
    "RouteRecord",
    "RouteState",
    "effective_speed",
]
