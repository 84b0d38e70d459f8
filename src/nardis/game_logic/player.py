"""Players: turn orchestration for a single seat at the table."""

from __future__ import annotations

import logging
from collections.abc import Sequence  # noqa: TC003
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from nardis.game_logic.catalog import (
    LEVEL_UP_REQUIREMENTS,
    RANGE_PER_LEVEL,
    next_level,
)
from nardis.game_logic.city import City  # noqa: TC001
from nardis.game_logic.equipment import Train, Upgrade  # noqa: TC001
from nardis.game_logic.finance import Finance
from nardis.game_logic.interfaces import find_by_id, resolve_by_id
from nardis.game_logic.resource import Resource  # noqa: TC001
from nardis.game_logic.route import Route, RouteRecord
from nardis.shared.enums import PlayerLevel, PlayerType, UpgradeType

if TYPE_CHECKING:
    from nardis.game_logic.state import TurnContext

logger = logging.getLogger(__name__)


class QueuedRoute(BaseModel):
    """A purchased route still under construction."""

    route: Route
    turn_cost: int


class QueuedRouteRecord(BaseModel):
    """Serialized queue entry."""

    route: RouteRecord
    turn_cost: int


class PlayerRecord(BaseModel):
    """Canonical serialized form of a :class:`Player`."""

    id: str
    name: str
    start_gold: int
    player_type: PlayerType
    start_city_id: str
    finance: Finance
    level: PlayerLevel
    range: int
    queue: list[QueuedRouteRecord]
    routes: list[RouteRecord]
    upgrade_ids: list[str]
    is_active: bool


class Player(BaseModel):
    """A participant owning routes, upgrades and a ledger.

    Each turn an active player may be promoted, finishes construction of
    queued routes, runs every active route and finally settles its ledger.
    Players eliminated by a takeover only keep their ledger ticking.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    start_gold: int
    player_type: PlayerType = PlayerType.HUMAN
    start_city: City
    finance: Finance | None = None
    level: PlayerLevel = PlayerLevel.NOVICE
    range: int | None = None
    queue: list[QueuedRoute] = Field(default_factory=list)
    routes: list[Route] = Field(default_factory=list)
    upgrades: list[Upgrade] = Field(default_factory=list)
    is_active: bool = True
    starting_shares: int | None = Field(default=None, ge=0, exclude=True)

    @model_validator(mode="after")
    def _open_ledger(self) -> Player:
        """Create the ledger and derive the range from the level."""
        if self.finance is None:
            stocks = None
            if self.starting_shares is not None:
                stocks = {self.id: self.starting_shares}
            self.finance = Finance(
                name=f"{self.name} ledger",
                player_id=self.id,
                gold=self.start_gold,
                stocks=stocks,
            )
        if self.range is None:
            self.range = RANGE_PER_LEVEL[self.level]
        return self

    @property
    def ledger(self) -> Finance:
        """Return the player's ledger."""
        if self.finance is None:
            self.finance = Finance(name=self.name, player_id=self.id, gold=0)
        return self.finance

    def equals(self, other: object) -> bool:
        """Return ``True`` when *other* is the same player."""
        return getattr(other, "id", None) == self.id

    def handle_turn(self, context: TurnContext) -> None:
        """Process a full turn for this player."""
        if not self.is_active:
            self.ledger.handle_turn(context)
            return
        self.check_level()
        self.handle_queue()
        for route in self.routes:
            route.handle_turn(context, self.upgrades)
        self.ledger.handle_turn(context, self.routes, self.upgrades)

    def check_level(self) -> bool:
        """Promote the player when every requirement of the next level is met."""
        target = next_level(self.level)
        if target is None:
            return False
        requirement = LEVEL_UP_REQUIREMENTS[target]
        if (
            len(self.routes) >= requirement.routes
            and self.ledger.average_revenue() >= requirement.revenue_per_turn
            and self.ledger.gold >= requirement.gold
        ):
            self.level = target
            self.range = RANGE_PER_LEVEL[target]
            logger.info("%s reached level %s", self.name, target.name)
            return True
        return False

    def handle_queue(self) -> list[Route]:
        """Progress construction and activate finished routes."""
        finished: list[Route] = []
        remaining: list[QueuedRoute] = []
        for entry in self.queue:
            entry.turn_cost -= 1
            if entry.turn_cost <= 0:
                finished.append(entry.route)
            else:
                remaining.append(entry)
        self.queue = remaining
        self.routes.extend(finished)
        return finished

    def add_route_to_queue(self, route: Route, turn_cost: int) -> bool:
        """Queue *route* for construction, claiming a slot in both cities."""
        if not route.city_one.increment_route_count():
            return False
        if not route.city_two.increment_route_count():
            route.city_one.decrement_route_count()
            return False
        self.queue.append(QueuedRoute(route=route, turn_cost=turn_cost))
        return True

    def remove_route_from_queue(self, route_id: str) -> bool:
        """Cancel a queued route, releasing its city slots."""
        for index, entry in enumerate(self.queue):
            if entry.route.id == route_id:
                del self.queue[index]
                _release_slots(entry.route)
                return True
        return False

    def remove_route_from_routes(self, route_id: str) -> bool:
        """Demolish an active route, releasing its city slots."""
        for index, route in enumerate(self.routes):
            if route.id == route_id:
                del self.routes[index]
                _release_slots(route)
                return True
        return False

    def add_upgrade(self, upgrade: Upgrade) -> bool:
        """Take ownership of *upgrade* unless it is already owned."""
        if self.owns_upgrade(upgrade.id):
            return False
        self.upgrades.append(upgrade)
        return True

    def owns_upgrade(self, upgrade_id: str) -> bool:
        """Return ``True`` when the player owns the upgrade *upgrade_id*."""
        return find_by_id(self.upgrades, upgrade_id) is not None

    def upgrades_of_type(self, kind: UpgradeType) -> list[Upgrade]:
        """Return owned upgrades with the given effect."""
        return [upgrade for upgrade in self.upgrades if upgrade.type is kind]

    def queued_routes(self) -> list[Route]:
        """Return the routes still under construction."""
        return [entry.route for entry in self.queue]

    def route_count(self) -> int:
        """Return the number of active and queued routes."""
        return len(self.routes) + len(self.queue)

    def merge_routes(self, routes: Sequence[Route]) -> int:
        """Adopt *routes* as active routes."""
        self.routes.extend(routes)
        return len(routes)

    def merge_queue(self, queue: Sequence[QueuedRoute]) -> int:
        """Adopt queued *queue* entries."""
        self.queue.extend(queue)
        return len(queue)

    def merge_upgrades(self, upgrades: Sequence[Upgrade]) -> int:
        """Adopt every upgrade in *upgrades* the player does not own yet."""
        merged = 0
        for upgrade in upgrades:
            if self.add_upgrade(upgrade):
                merged += 1
        return merged

    def set_inactive(self) -> None:
        """Eliminate the player after its assets were handed over."""
        self.is_active = False
        self.queue = []
        self.routes = []
        self.upgrades = []

    def to_record(self) -> PlayerRecord:
        """Return the canonical record describing this player."""
        return PlayerRecord(
            id=self.id,
            name=self.name,
            start_gold=self.start_gold,
            player_type=self.player_type,
            start_city_id=self.start_city.id,
            finance=self.ledger,
            level=self.level,
            range=self.range or 0,
            queue=[
                QueuedRouteRecord(
                    route=entry.route.to_record(), turn_cost=entry.turn_cost
                )
                for entry in self.queue
            ],
            routes=[route.to_record() for route in self.routes],
            upgrade_ids=[upgrade.id for upgrade in self.upgrades],
            is_active=self.is_active,
        )

    def deconstruct(self) -> str:
        """Return the JSON record describing this player."""
        return self.to_record().model_dump_json()

    @classmethod
    def from_json(
        cls,
        raw: str,
        cities: Sequence[City],
        trains: Sequence[Train],
        resources: Sequence[Resource],
        upgrades: Sequence[Upgrade],
    ) -> Player:
        """Rebuild a player, resolving references against the world collections."""
        record = PlayerRecord.model_validate_json(raw)
        return cls(**cls._record_fields(record, cities, trains, resources, upgrades))

    @staticmethod
    def _record_fields(
        record: PlayerRecord,
        cities: Sequence[City],
        trains: Sequence[Train],
        resources: Sequence[Resource],
        upgrades: Sequence[Upgrade],
    ) -> dict[str, Any]:
        return {
            "id": record.id,
            "name": record.name,
            "start_gold": record.start_gold,
            "player_type": record.player_type,
            "start_city": resolve_by_id(cities, record.start_city_id, "city"),
            "finance": record.finance,
            "level": record.level,
            "range": record.range,
            "queue": [
                QueuedRoute(
                    route=Route.from_record(entry.route, cities, trains, resources),
                    turn_cost=entry.turn_cost,
                )
                for entry in record.queue
            ],
            "routes": [
                Route.from_record(route, cities, trains, resources)
                for route in record.routes
            ],
            "upgrades": [
                resolve_by_id(upgrades, upgrade_id, "upgrade")
                for upgrade_id in record.upgrade_ids
            ],
            "is_active": record.is_active,
        }


def _release_slots(route: Route) -> None:
    route.city_one.decrement_route_count()
    route.city_two.decrement_route_count()


__all__ = ["Player", "PlayerRecord", "QueuedRoute", "QueuedRouteRecord"]
