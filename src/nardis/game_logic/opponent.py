"""Computer controlled players and their turn heuristics."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence  # noqa: TC003
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from nardis.game_logic.catalog import LEVEL_UP_REQUIREMENTS, next_level
from nardis.game_logic.city import City, CityResource
from nardis.game_logic.configuration import DEFAULT_SAVE
from nardis.game_logic.equipment import Train, Upgrade  # noqa: TC001
from nardis.game_logic.offers import AdjustedTrain, BuyableRoute, PotentialRoute
from nardis.game_logic.player import Player, PlayerRecord
from nardis.game_logic.resource import Resource  # noqa: TC001
from nardis.game_logic.route import RouteCargo, RoutePlanCargo
from nardis.shared.enums import (
    PlayerLevel,
    PlayerType,
    ResourceTier,
    SaveDecision,
    SaveGoal,
)

if TYPE_CHECKING:
    from nardis.game_logic.game import Nardis
    from nardis.game_logic.state import TurnContext
    from nardis.game_logic.stock import Stock

logger = logging.getLogger(__name__)

# Minimum cargo space considered for routes once past the first level.
PREFERRED_CARGO_SPACE = 5
# Turns spent loading and unloading over a full revolution.
HANDLING_TURNS = 4


class SavePlan(BaseModel):
    """Gold an opponent is holding back for a future goal."""

    goal: SaveGoal = SaveGoal.NONE
    target_id: str | None = None
    turn: int = Field(default=1, ge=0)
    duration: int = Field(default=0, ge=0)

    @property
    def is_saving(self) -> bool:
        """Return ``True`` while a goal is pending."""
        return self.goal is not SaveGoal.NONE

    def expires_on(self) -> int:
        """Return the first turn on which the plan is evaluated again."""
        return self.turn + self.duration


def evaluate_save_plan(plan: SavePlan, turn: int) -> SaveDecision:
    """Decide whether an opponent acts, waits or resolves its pending save."""
    if not plan.is_saving:
        return SaveDecision.PROCEED
    if turn < plan.expires_on():
        return SaveDecision.WAIT
    return SaveDecision.RESUME


class RoutePower(BaseModel):
    """Expected return of operating a candidate route for one revolution."""

    expected_profit_value: int
    full_revolution_in_turns: int
    power_index: float


class RouteCandidate(BaseModel):
    """A potential route scored with its suggested cargo plan."""

    route: PotentialRoute
    plan: RoutePlanCargo
    power: RoutePower


class OpponentRecord(PlayerRecord):
    """Serialized opponent, including its pending save plan."""

    save: SavePlan = Field(default_factory=SavePlan)


class Opponent(Player):
    """A player whose actions are deduced from its own state every turn.

    After the regular player turn the opponent buys upgrades, trades stock,
    extends its network with the best scoring routes, demolishes routes that
    keep losing money and finally looks for rivals it can buy out. It can
    decide to hold gold back for a level-up or a buyout, in which case it
    stays idle until the save plan expires.
    """

    player_type: PlayerType = PlayerType.COMPUTER
    save: SavePlan = Field(default_factory=SavePlan)

    def handle_turn(self, context: TurnContext, game: Nardis | None = None) -> None:
        """Process the player turn, then act on the game when one is given."""
        super().handle_turn(context)
        if self.is_active and game is not None:
            self.deduce_action(context, game)

    def deduce_action(self, context: TurnContext, game: Nardis) -> None:
        """Run the opponent heuristics for the current turn."""
        decision = evaluate_save_plan(self.save, context.turn)
        if decision is SaveDecision.WAIT:
            logger.debug(
                "%s saving until turn %d", self.name, self.save.expires_on()
            )
            return
        if decision is SaveDecision.RESUME and not self._resolve_save(
            context.turn, game
        ):
            return
        self.buy_available_upgrades(context, game)
        self.inspect_stock_options(game)
        if self.should_purchase_routes(context.turn, game):
            train = self.get_suggested_train(game.get_array_of_adjusted_trains(self))
            if train is not None:
                origins = self.get_interesting_routes(game, train)
                count = len(origins[0]) if origins else 0
                self.purchase_routes(
                    game, self.pick_interesting_routes(origins, count, train)
                )
        self.delete_consistently_unprofitable_routes(context.turn, game)
        self.check_if_any_player_can_be_bought_out(context.turn, game)

    def buy_available_upgrades(self, context: TurnContext, game: Nardis) -> int:
        """Buy every affordable upgrade the opponent is eligible for."""
        bought = 0
        for upgrade in context.data.upgrades:
            if self.level < upgrade.level_required or self.owns_upgrade(upgrade.id):
                continue
            if self.ledger.gold - upgrade.cost < 0:
                continue
            logger.info(
                "%s purchasing upgrade %s for %dg",
                self.name,
                upgrade.name,
                upgrade.cost,
            )
            if game.add_upgrade_to_player(upgrade.id, player=self):
                bought += 1
        return bought

    def inspect_stock_options(self, game: Nardis) -> bool:
        """Sell stock when broke, otherwise buy the cheapest available share."""
        finance = self.ledger
        gold = finance.gold
        if gold <= 0 and finance.average_revenue() - finance.average_expense() <= 0:
            held = [
                game.stocks[owner_id]
                for owner_id, shares in finance.holdings.items()
                if shares > 0 and owner_id in game.stocks
            ]
            if not held:
                return False
            held.sort(key=lambda stock: stock.sell_value(), reverse=True)
            return game.sell_stock(held[0].owning_player_id, player=self)
        candidates = sorted(
            (
                stock
                for stock in game.stocks.values()
                if stock.is_active
                and not stock.is_fully_subscribed()
                and gold >= stock.buy_value()
            ),
            key=lambda stock: stock.buy_value(),
        )
        if (
            candidates
            and finance.average_revenue() > 0
            and gold - candidates[0].buy_value() > math.floor(self.start_gold / 20)
        ):
            return game.buy_stock(candidates[0].owning_player_id, player=self)
        return False

    def should_purchase_routes(self, turn: int, game: Nardis) -> bool:
        """Return ``False`` when gold should be held back for a level-up."""
        target = next_level(self.level)
        if target is None:
            return True
        requirement = LEVEL_UP_REQUIREMENTS[target]
        if len(self.routes) < requirement.routes:
            return True
        gold = self.ledger.gold
        if (
            self.ledger.average_revenue() >= requirement.revenue_per_turn
            and gold < requirement.gold
        ):
            logger.info(
                "%s saving for level-up, missing %dg",
                self.name,
                requirement.gold - gold,
            )
            self.save = SavePlan(
                goal=SaveGoal.LEVEL_UP,
                turn=turn,
                duration=_save_duration(game),
            )
            return False
        return True

    def get_suggested_train(
        self, trains: Sequence[AdjustedTrain]
    ) -> AdjustedTrain | None:
        """Return the train with the best price to performance ratio."""
        eligible = [item for item in trains if self.level >= item.train.level_required]
        if self.level > PlayerLevel.NOVICE:
            spacious = [
                item
                for item in eligible
                if item.train.cargo_space >= PREFERRED_CARGO_SPACE
            ]
            eligible = spacious or eligible
        best: AdjustedTrain | None = None
        best_ratio = math.inf
        best_space = 0
        for item in eligible:
            train = item.train
            ratio = (item.cost + train.upkeep * 5) / (
                train.speed + train.cargo_space * 4
            )
            if (ratio < best_ratio and train.cargo_space >= best_space) or (
                math.isclose(ratio, best_ratio) and train.cargo_space > best_space
            ):
                best, best_ratio, best_space = item, ratio, train.cargo_space
        if best is not None:
            logger.debug("%s suggested train %s", self.name, best.train.name)
        return best

    def get_unique_origins(self) -> list[City]:
        """Return every non-full city connected to the opponent's network."""
        origins: list[City] = []
        seen: set[str] = set()
        candidates = [self.start_city]
        for route in self.routes:
            candidates.extend((route.city_one, route.city_two))
        for city in candidates:
            if city.id in seen or city.is_full():
                continue
            seen.add(city.id)
            origins.append(city)
        return origins

    def get_interesting_routes(
        self, game: Nardis, train: AdjustedTrain
    ) -> list[list[RouteCandidate]]:
        """Return affordable candidates per origin, best first."""
        gold = self.ledger.gold
        result: list[list[RouteCandidate]] = []
        for origin in self.get_unique_origins():
            candidates: list[RouteCandidate] = []
            for route in game.get_array_of_possible_routes(origin, player=self):
                if route.gold_cost + train.cost > gold:
                    continue
                plan = self.get_suggested_route_plan(route, train.train.cargo_space)
                candidates.append(
                    RouteCandidate(
                        route=route,
                        plan=plan,
                        power=self.get_power(route, train.train, plan),
                    )
                )
            candidates.sort(key=lambda item: item.power.power_index, reverse=True)
            logger.debug(
                "%s found %d routes from %s", self.name, len(candidates), origin.name
            )
            result.append(candidates)
        return result

    def pick_interesting_routes(
        self,
        origins: Sequence[Sequence[RouteCandidate]],
        count: int,
        train: AdjustedTrain,
    ) -> list[BuyableRoute]:
        """Flatten every origin's candidates and keep the *count* strongest."""
        ranked = sorted(
            (candidate for candidates in origins for candidate in candidates),
            key=lambda item: item.power.power_index,
            reverse=True,
        )
        picked: list[BuyableRoute] = []
        pairs: set[frozenset[str]] = set()
        for candidate in ranked:
            if len(picked) >= count:
                break
            route = candidate.route
            pair = frozenset((route.city_one.id, route.city_two.id))
            if pair in pairs:
                continue
            pairs.add(pair)
            picked.append(
                BuyableRoute(
                    **route.model_dump(exclude={"city_one", "city_two"}),
                    city_one=route.city_one,
                    city_two=route.city_two,
                    train=train.train,
                    train_cost=train.cost,
                    route_plan_cargo=candidate.plan,
                )
            )
        return picked

    def get_power(
        self, route: PotentialRoute, train: Train, plan: RoutePlanCargo
    ) -> RoutePower:
        """Score a route by its expected profit per turn of a full revolution."""
        revolution = math.ceil(route.distance / train.speed) * 2
        upkeep = (revolution + HANDLING_TURNS) * train.upkeep
        expected = -upkeep
        for cargo, destination in (
            (plan.city_one, route.city_two),
            (plan.city_two, route.city_one),
        ):
            expected += sum(
                item.target_amount * item.resource.value
                for item in cargo
                if destination.is_demand(item.resource)
            )
        return RoutePower(
            expected_profit_value=expected,
            full_revolution_in_turns=revolution,
            power_index=expected / revolution,
        )

    def get_suggested_route_plan(
        self, route: PotentialRoute, cargo_space: int
    ) -> RoutePlanCargo:
        """Suggest cargo for both directions of *route*."""
        return RoutePlanCargo(
            city_one=self.get_suggested_cargo(
                route.city_one, route.city_two, cargo_space
            ),
            city_two=self.get_suggested_cargo(
                route.city_two, route.city_one, cargo_space
            ),
        )

    def get_suggested_cargo(
        self, origin: City, destination: City, cargo_space: int
    ) -> list[RouteCargo]:
        """Fill *cargo_space* with the most valuable goods *destination* wants.

        Whatever space is left is padded with the low-yield goods of the
        origin so the train never departs partially empty.
        """
        fillers: list[CityResource] = []
        goods: list[CityResource] = []
        for entry in origin.supply:
            if entry.resource.tier is ResourceTier.LOW:
                fillers.append(entry)
            else:
                goods.append(entry)
        goods.sort(key=lambda entry: entry.resource.value, reverse=True)
        fillers.sort(key=lambda entry: entry.resource.value, reverse=True)
        result: list[RouteCargo] = []
        remaining = cargo_space
        for entry in goods:
            if not destination.is_demand(entry.resource) or entry.available <= 0:
                continue
            amount = remaining // entry.resource.weight
            if amount <= 0:
                continue
            remaining -= amount * entry.resource.weight
            result.append(RouteCargo(resource=entry.resource, target_amount=amount))
        if remaining > 0:
            result.extend(_filler_cargo(remaining, fillers))
        return result

    def purchase_routes(self, game: Nardis, routes: Sequence[BuyableRoute]) -> int:
        """Buy *routes* in order until gold or queue constraints are hit."""
        logger.debug("%s attempting to purchase %d routes", self.name, len(routes))
        minimum = (
            0
            if self.level == PlayerLevel.NOVICE
            else math.floor(self.ledger.gold * ((self.level + 2) / 10))
        )
        purchased = 0
        for index, route in enumerate(routes):
            if (
                self.ledger.gold - route.total_cost <= minimum
                or len(self.queue) >= game.config.max_queue_length
            ):
                logger.debug("%s stopped purchasing after %d routes", self.name, index)
                break
            if game.add_route_to_player_queue(route, player=self):
                purchased += 1
        return purchased

    def delete_consistently_unprofitable_routes(self, turn: int, game: Nardis) -> int:
        """Demolish routes that lost money for two full revolutions."""
        deleted = 0
        for route in list(self.routes):
            if route.profit >= 0:
                continue
            if turn - route.purchased_on_turn < route.revolution_turns() * 2:
                continue
            logger.info(
                "%s deleting route %s due to unprofitability %d",
                self.name,
                route.name,
                route.profit,
            )
            if game.remove_route_from_player_routes(
                route.id, math.floor(route.cost / 2), player=self
            ):
                deleted += 1
        return deleted

    def check_if_any_player_can_be_bought_out(self, turn: int, game: Nardis) -> bool:
        """Buy out a rival when possible, otherwise start saving for it."""
        for stock in list(game.stocks.values()):
            if not self._can_buy_out(stock):
                continue
            cost = self.buy_out_cost(stock)
            if self.ledger.gold >= cost:
                logger.info(
                    "%s commencing buyout of %s", self.name, stock.owning_player_id
                )
                if game.buy_out_player(stock.owning_player_id, player=self):
                    return True
            elif self.level >= PlayerLevel.ADVANCED:
                logger.info(
                    "%s saving to buy out %s", self.name, stock.owning_player_id
                )
                self.save = SavePlan(
                    goal=SaveGoal.BUYOUT,
                    target_id=stock.owning_player_id,
                    turn=turn,
                    duration=_save_duration(game),
                )
                return False
        return False

    def buy_out_cost(self, stock: Stock) -> int:
        """Return the gold needed to acquire every other holder's shares."""
        return sum(
            value.total_value
            for value in stock.get_buy_out_values()
            if value.id != self.id
        )

    def _can_buy_out(self, stock: Stock) -> bool:
        return (
            stock.is_active
            and stock.owning_player_id != self.id
            and stock.is_fully_subscribed()
            and stock.is_stock_holder(self.id)
        )

    def _resolve_save(self, turn: int, game: Nardis) -> bool:
        """Settle an expired save plan; return ``True`` to keep acting."""
        plan = self.save
        if plan.goal is SaveGoal.BUYOUT:
            stock = game.stocks.get(plan.target_id or "")
            if stock is not None and self._can_buy_out(stock):
                if self.ledger.gold < self.buy_out_cost(stock):
                    self.save = plan.model_copy(update={"turn": turn})
                    logger.debug("%s extends buyout save", self.name)
                    return False
                game.buy_out_player(stock.owning_player_id, player=self)
        self.save = SavePlan(turn=turn)
        return True

    def to_record(self) -> OpponentRecord:
        """Return the canonical record describing this opponent."""
        return OpponentRecord(
            **super().to_record().model_dump(exclude={"finance"}),
            finance=self.ledger,
            save=self.save,
        )

    @classmethod
    def from_json(
        cls,
        raw: str,
        cities: Sequence[City],
        trains: Sequence[Train],
        resources: Sequence[Resource],
        upgrades: Sequence[Upgrade],
    ) -> Opponent:
        """Rebuild an opponent, resolving references against the world."""
        record = OpponentRecord.model_validate_json(raw)
        return cls(
            **cls._record_fields(record, cities, trains, resources, upgrades),
            save=record.save,
        )


def _filler_cargo(space: int, fillers: Sequence[CityResource]) -> list[RouteCargo]:
    if not fillers:
        return []
    first = math.ceil(space / 2) if len(fillers) > 1 else space
    cargo = [RouteCargo(resource=fillers[0].resource, target_amount=first)]
    if space - first > 0:
        cargo.append(
            RouteCargo(resource=fillers[1].resource, target_amount=space - first)
        )
    return cargo


def _save_duration(game: Nardis) -> int:
    return game.config.save_duration or DEFAULT_SAVE


__all__ = [
    "Opponent",
    "OpponentRecord",
    "RouteCandidate",
    "RoutePower",
    "SavePlan",
    "evaluate_save_plan",
]
