"""The game facade: turn loop, player commands, stock settlement and saving."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence  # noqa: TC003

from pydantic import BaseModel
from pydantic.config import ConfigDict

from nardis.game_logic.catalog import OPPONENT_NAMES, route_turn_cost
from nardis.game_logic.city import City  # noqa: TC001
from nardis.game_logic.configuration import (
    GameConfiguration,
    get_default_game_configuration,
)
from nardis.game_logic.equipment import Train  # noqa: TC001
from nardis.game_logic.finance import Finance
from nardis.game_logic.generator import WorldGenerator
from nardis.game_logic.interfaces import find_by_id, resolve_by_id
from nardis.game_logic.offers import (
    AdjustedTrain,
    BuyableRoute,
    PotentialRoute,
    RouteCost,
)
from nardis.game_logic.opponent import Opponent
from nardis.game_logic.persistence import GameStorage
from nardis.game_logic.player import Player
from nardis.game_logic.route import Route, RoutePlanCargo
from nardis.game_logic.state import GameData, TurnContext
from nardis.game_logic.stock import Stock
from nardis.shared.enums import FinanceType, UpgradeType
from nardis.shared.events import EventJournal
from nardis.shared.logging_config import LoggingConfiguration
from nardis.shared.rng import RandomService

logger = logging.getLogger(__name__)

# Cheapest a track can become through upgrades.
MIN_TRACK_COST = 10


class GameStatus(BaseModel):
    """Whether the game is decided and, if so, who won."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    game_over: bool = False


class Nardis:
    """Coordinate a single game between one human and any number of opponents.

    The facade owns the world collections, the players and the stock map.
    Every command acts on behalf of an explicit ``player``, defaulting to
    the human player; declined commands return ``False`` and leave the game
    untouched.
    """

    def __init__(
        self,
        data: GameData,
        players: Sequence[Player],
        stocks: dict[str, Stock],
        *,
        current_player: Player | None = None,
        turn: int = 1,
        rng: RandomService | None = None,
        config: GameConfiguration | None = None,
        storage: GameStorage | None = None,
        logging_config: LoggingConfiguration | None = None,
        journal: EventJournal | None = None,
    ) -> None:
        if not players:
            msg = "A game needs at least one player."
            raise ValueError(msg)
        self._data = data
        self._players = list(players)
        self._stocks = stocks
        self._current_player = current_player or self._players[0]
        self._turn = turn
        self._rng = rng or RandomService()
        self._config = config or get_default_game_configuration()
        self._storage = storage or GameStorage()
        self._logging_config = logging_config or LoggingConfiguration()
        self._logging_config.apply()
        self._journal = journal or EventJournal()
        self.update_players_net_worth()

    @property
    def data(self) -> GameData:
        """Return the world collections."""
        return self._data

    @property
    def players(self) -> list[Player]:
        """Return every player, the human first."""
        return self._players

    @property
    def stocks(self) -> dict[str, Stock]:
        """Return the stocks keyed by owning player id."""
        return self._stocks

    @property
    def current_player(self) -> Player:
        """Return the player commands default to."""
        return self._current_player

    @property
    def turn(self) -> int:
        """Return the current turn number."""
        return self._turn

    @property
    def config(self) -> GameConfiguration:
        """Return the game configuration."""
        return self._config

    @property
    def rng(self) -> RandomService:
        """Return the random service shared by every turn handler."""
        return self._rng

    @property
    def storage(self) -> GameStorage:
        """Return the storage the game is saved to."""
        return self._storage

    @property
    def journal(self) -> EventJournal:
        """Return the journal of notable game events."""
        return self._journal

    @property
    def logging_config(self) -> LoggingConfiguration:
        """Return the logging configuration the game was created with."""
        return self._logging_config

    def find_player(self, player_id: str) -> Player | None:
        """Return the player with *player_id*, if any."""
        return find_by_id(self._players, player_id)

    def end_turn(self) -> None:
        """Advance the game by one full turn and save it."""
        context = TurnContext(turn=self._turn, data=self._data, rng=self._rng)
        levels = {player.id: player.level for player in self._players}
        self._current_player.handle_turn(context)
        for player in self._players:
            if isinstance(player, Opponent) and player.id != self._current_player.id:
                player.handle_turn(context, self)
        for player in self._players:
            if player.level != levels[player.id]:
                self._journal.record(
                    self._turn,
                    "level_up",
                    f"{player.name} reached {player.level.name.lower()}",
                    player_id=player.id,
                    level=int(player.level),
                )
        for city in self._data.cities:
            city.handle_turn(context)
        for resource in self._data.resources:
            resource.handle_turn(context)
        self._turn += 1
        self.update_stocks()
        self.update_players_net_worth()
        self.save_game()
        logger.debug("Turn %d ended", self._turn - 1)

    def get_game_status(self) -> GameStatus:
        """Report whether a single active player remains."""
        active = [player for player in self._players if player.is_active]
        if len(active) == 1:
            logger.info("%s is the only active player left", active[0].name)
            return GameStatus(id=active[0].id, game_over=True)
        return GameStatus()

    def get_array_of_possible_routes(
        self, origin: City, player: Player | None = None
    ) -> list[PotentialRoute]:
        """Return every route *player* could build from *origin* right now."""
        player = self._resolve(player)
        constraint = player.range or 0
        routes: list[PotentialRoute] = []
        for city in self._data.cities:
            distance = city.distance_to(origin)
            if distance <= 0 or distance > constraint or city.is_full():
                continue
            cost = self.get_potential_route_cost(distance, player)
            routes.append(
                PotentialRoute(
                    city_one=origin,
                    city_two=city,
                    distance=distance,
                    gold_cost=cost.gold_cost,
                    turn_cost=cost.turn_cost,
                    purchased_on_turn=self._turn,
                )
            )
        return routes

    def get_potential_route_cost(
        self, distance: int, player: Player | None = None
    ) -> RouteCost:
        """Return the track price and build time after *player*'s upgrades."""
        player = self._resolve(player)
        gold_cost = distance * 2
        for upgrade in player.upgrades_of_type(UpgradeType.TRACK_VALUE_CHEAPER):
            discount = math.floor(gold_cost * upgrade.value)
            gold_cost = max(MIN_TRACK_COST, gold_cost - discount)
        turn_cost = route_turn_cost(distance)
        for upgrade in player.upgrades_of_type(UpgradeType.TURN_COST_CHEAPER):
            if turn_cost >= 2:
                turn_cost -= int(upgrade.value)
        return RouteCost(gold_cost=gold_cost, turn_cost=max(1, turn_cost))

    def get_array_of_adjusted_trains(
        self, player: Player | None = None
    ) -> list[AdjustedTrain]:
        """Return every train priced with *player*'s train discounts."""
        player = self._resolve(player)
        discounts = player.upgrades_of_type(UpgradeType.TRAIN_VALUE_CHEAPER)
        trains: list[AdjustedTrain] = []
        for train in self._data.trains:
            cost = train.cost
            for upgrade in discounts:
                cost -= math.floor(cost * upgrade.value)
            trains.append(AdjustedTrain(train=train, cost=max(1, cost)))
        return trains

    def add_route_to_player_queue(
        self, buyable: BuyableRoute, player: Player | None = None
    ) -> bool:
        """Buy the track and train of *buyable* and queue its construction."""
        player = self._resolve(player)
        if not player.is_active:
            return False
        if buyable.city_one.is_full() or buyable.city_two.is_full():
            logger.debug("%s cannot build to a full city", player.name)
            return False
        if player.ledger.gold < buyable.total_cost:
            logger.debug(
                "%s cannot afford route for %dg", player.name, buyable.total_cost
            )
            return False
        route = Route(
            id=self._rng.create_id(),
            city_one=buyable.city_one,
            city_two=buyable.city_two,
            train=buyable.train,
            route_plan_cargo=buyable.route_plan_cargo,
            distance=buyable.distance,
            cost=buyable.gold_cost,
            purchased_on_turn=buyable.purchased_on_turn,
        )
        if not player.add_route_to_queue(route, buyable.turn_cost):
            return False
        finance = player.ledger
        finance.add_to_finance_expense(
            FinanceType.TRACK, route.id, 1, buyable.gold_cost
        )
        finance.add_to_finance_expense(
            FinanceType.TRAIN, buyable.train.id, 1, buyable.train_cost
        )
        self._journal.record(
            self._turn,
            "route_queued",
            f"{player.name} queued {route.name}",
            player_id=player.id,
            route_id=route.id,
            cost=buyable.total_cost,
        )
        logger.info("%s queued route %s", player.name, route.name)
        return True

    def remove_route_from_player_queue(
        self, route_id: str, train_id: str, player: Player | None = None
    ) -> bool:
        """Cancel a queued route and refund its track and train."""
        player = self._resolve(player)
        finance = player.ledger
        if (
            find_by_id(player.queued_routes(), route_id) is None
            or finance.find_expense(FinanceType.TRACK, route_id) is None
            or finance.find_expense(FinanceType.TRAIN, train_id) is None
        ):
            logger.debug("%s cannot cancel route %s", player.name, route_id)
            return False
        finance.remove_from_finance_expense(FinanceType.TRACK, route_id)
        finance.remove_from_finance_expense(FinanceType.TRAIN, train_id)
        return player.remove_route_from_queue(route_id)

    def remove_route_from_player_routes(
        self, route_id: str, value: int, player: Player | None = None
    ) -> bool:
        """Demolish an active route, recouping *value* gold."""
        player = self._resolve(player)
        if not player.remove_route_from_routes(route_id):
            logger.debug("Route %s not found for %s", route_id, player.name)
            return False
        player.ledger.recoup_deleted_route(value)
        self._journal.record(
            self._turn,
            "route_deleted",
            player_id=player.id,
            route_id=route_id,
            recouped=value,
        )
        return True

    def add_upgrade_to_player(
        self, upgrade_id: str, player: Player | None = None
    ) -> bool:
        """Sell the upgrade *upgrade_id* to *player*."""
        player = self._resolve(player)
        upgrade = find_by_id(self._data.upgrades, upgrade_id)
        if upgrade is None:
            logger.debug("Upgrade %s could not be found", upgrade_id)
            return False
        if (
            player.owns_upgrade(upgrade.id)
            or player.level < upgrade.level_required
            or player.ledger.gold < upgrade.cost
        ):
            return False
        player.add_upgrade(upgrade)
        player.ledger.add_to_finance_expense(
            FinanceType.UPGRADE, upgrade.id, 1, upgrade.cost
        )
        self._journal.record(
            self._turn,
            "upgrade_purchased",
            f"{player.name} bought {upgrade.name}",
            player_id=player.id,
            upgrade_id=upgrade.id,
        )
        return True

    def change_active_player_route(
        self,
        route_id: str,
        train: Train,
        route_plan: RoutePlanCargo,
        cost: int,
        player: Player | None = None,
    ) -> bool:
        """Swap the train and cargo plan of an active route."""
        player = self._resolve(player)
        route = find_by_id(player.routes, route_id)
        if route is None:
            logger.debug("Route %s not found for %s", route_id, player.name)
            return False
        if cost > player.ledger.gold:
            return False
        if cost > 0:
            player.ledger.add_to_finance_expense(FinanceType.TRAIN, train.id, 1, cost)
        route.change(train, route_plan)
        return True

    def buy_stock(self, owner_id: str, player: Player | None = None) -> bool:
        """Buy one share of *owner_id*'s stock."""
        return self.perform_stock_action(owner_id, buy=True, player=player)

    def sell_stock(self, owner_id: str, player: Player | None = None) -> bool:
        """Sell one share of *owner_id*'s stock."""
        return self.perform_stock_action(owner_id, buy=False, player=player)

    def perform_stock_action(
        self, owner_id: str, *, buy: bool, player: Player | None = None
    ) -> bool:
        """Trade a single share and settle the consequences."""
        player = self._resolve(player)
        stock = self._stocks.get(owner_id)
        owner = self.find_player(owner_id)
        if stock is None or owner is None or not stock.is_active:
            return False
        value = stock.buy_value() if buy else stock.sell_value()
        if buy and player.ledger.gold < value:
            return False
        traded = stock.buy_stock(player.id) if buy else stock.sell_stock(player.id)
        if not traded:
            logger.debug(
                "%s could not %s stock %s",
                player.name,
                "buy" if buy else "sell",
                owner_id,
            )
            return False
        if buy:
            player.ledger.buy_stock(owner_id, value)
        else:
            player.ledger.sell_stock(owner_id, value)
        self.update_stock(owner)
        self.update_player_net_worth(player)
        self.update_player_net_worth(owner)
        self._journal.record(
            self._turn,
            "stock_bought" if buy else "stock_sold",
            player_id=player.id,
            owner_id=owner_id,
            value=value,
        )
        logger.info(
            "%s %s stock of %s for %dg",
            player.name,
            "bought" if buy else "sold",
            owner.name,
            value,
        )
        if buy:
            self._check_if_player_is_fully_owned(owner, player)
        return True

    def buy_out_player(
        self,
        owner_id: str,
        player: Player | None = None,
        *,
        self_buy_out: bool = False,
    ) -> bool:
        """Acquire every outstanding share of *owner_id*'s stock.

        Every holder other than the acquirer and the owner is paid the full
        value of its position; the owner's shares still count toward the
        acquirer's expense. Unless the owner buys itself out, the acquisition
        is followed by a takeover of the owner's company.
        """
        player = self._resolve(player)
        stock = self._stocks.get(owner_id)
        loser = self.find_player(owner_id)
        if stock is None or loser is None or not stock.is_active:
            return False
        if not stock.is_fully_subscribed():
            logger.debug("Stock %s is not fully subscribed", owner_id)
            return False
        positions = [
            value
            for value in stock.get_buy_out_values()
            if value.id != player.id and value.shares > 0
        ]
        cost = sum(value.total_value for value in positions)
        if player.ledger.gold < cost:
            return False
        for position in positions:
            holder = self.find_player(position.id)
            stock.sell_stock(position.id, position.shares)
            if holder is None:
                continue
            # the owner's own shares change hands unpaid
            payment = 0 if position.id == owner_id else position.total_value
            holder.ledger.sell_stock(owner_id, payment, position.shares)
        acquired = stock.constants.max_stock_amount - stock.shares.get(player.id, 0)
        for _ in range(acquired):
            stock.buy_stock(player.id)
        player.ledger.buy_stock(owner_id, 0, acquired)
        if cost > 0:
            player.ledger.add_to_finance_expense(
                FinanceType.STOCK_BUY, owner_id, 1, cost
            )
        self._journal.record(
            self._turn,
            "buy_out",
            f"{player.name} bought out {len(positions)} holders of {loser.name}",
            player_id=player.id,
            owner_id=owner_id,
            cost=cost,
        )
        logger.info("%s bought out %s for %dg", player.name, loser.name, cost)
        if not self_buy_out:
            self.player_take_over(player, loser, stock)
        else:
            self.update_stock(loser)
            self.update_players_net_worth()
        return True

    def player_take_over(self, victor: Player, loser: Player, stock: Stock) -> None:
        """Hand every asset of *loser* to *victor* and retire the loser."""
        logger.info("%s is taking over %s", victor.name, loser.name)
        profit = loser.ledger.gold
        if profit > 0:
            victor.ledger.add_to_finance_income(
                FinanceType.STOCK_SELL, loser.id, 1, profit
            )
            loser.ledger.add_to_finance_expense(
                FinanceType.STOCK_BUY, loser.id, 1, profit
            )
        queued = victor.merge_queue(loser.queue)
        routes = victor.merge_routes(loser.routes)
        upgrades = victor.merge_upgrades(loser.upgrades)
        stocks, shares = self.merge_stock(victor, loser)
        loser.set_inactive()
        stock.set_inactive(self._turn)
        self.update_stocks()
        self.update_players_net_worth()
        self._journal.record(
            self._turn,
            "take_over",
            f"{victor.name} took over {loser.name}",
            player_id=victor.id,
            loser_id=loser.id,
            gold=max(profit, 0),
            routes=routes,
            queue=queued,
            upgrades=upgrades,
            stocks=stocks,
            shares=shares,
        )

    def merge_stock(self, victor: Player, loser: Player) -> tuple[int, int]:
        """Move the loser's holdings in other stocks to the victor."""
        merged_stocks = 0
        merged_shares = 0
        for owner_id, amount in list(loser.ledger.holdings.items()):
            if owner_id == loser.id or amount <= 0:
                continue
            stock = self._stocks.get(owner_id)
            if stock is None:
                continue
            loser.ledger.sell_stock(owner_id, 0, amount)
            stock.sell_stock(loser.id, amount)
            for _ in range(amount):
                stock.buy_stock(victor.id)
            victor.ledger.buy_stock(owner_id, 0, amount)
            merged_stocks += 1
            merged_shares += amount
        return merged_stocks, merged_shares

    def update_stocks(self) -> None:
        """Revalue the stock of every player."""
        for player in self._players:
            self.update_stock(player)

    def update_stock(self, player: Player) -> bool:
        """Revalue the stock owned by *player*."""
        stock = self._stocks.get(player.id)
        if stock is None:
            return False
        return stock.update_value(player.ledger, player.route_count(), self._turn)

    def update_players_net_worth(self) -> None:
        """Recompute the net worth of every player."""
        for player in self._players:
            self.update_player_net_worth(player)

    def update_player_net_worth(self, player: Player) -> int:
        """Recompute and return the net worth of *player*."""
        return player.ledger.update_net_worth(
            player.routes,
            player.queued_routes(),
            player.upgrades,
            self._stocks,
            self._config.net_worth,
        )

    def save_game(self) -> None:
        """Persist the whole game to the configured storage."""
        self._storage.save(
            self._data,
            self._players,
            self._stocks,
            self._current_player.id,
            self._turn,
        )

    def clear_storage(self) -> None:
        """Remove the saved game from the configured storage."""
        self._storage.clear()

    def _check_if_player_is_fully_owned(self, owner: Player, player: Player) -> None:
        stock = self._stocks[owner.id]
        if (
            owner.id != player.id
            and stock.shares.get(player.id, 0) >= stock.constants.max_stock_amount
        ):
            logger.info("%s now owns all of %s", player.name, owner.name)
            self.player_take_over(player, owner, stock)

    def _resolve(self, player: Player | None) -> Player:
        return player if player is not None else self._current_player

    @classmethod
    def create_from_player(
        cls,
        name: str,
        gold: int | None = None,
        opponents: int | None = None,
        *,
        rng: RandomService | None = None,
        config: GameConfiguration | None = None,
        storage: GameStorage | None = None,
        logging_config: LoggingConfiguration | None = None,
    ) -> Nardis:
        """Generate a new world and seat a human player plus opponents."""
        config = config or get_default_game_configuration()
        rng = rng or RandomService()
        gold = config.start_gold if gold is None else gold
        opponents = config.start_opponents if opponents is None else opponents
        if opponents > len(OPPONENT_NAMES):
            msg = f"At most {len(OPPONENT_NAMES)} opponents are supported."
            raise ValueError(msg)
        data = WorldGenerator(rng).generate(opponents + 1)
        start_cities = data.start_cities()
        names = list(OPPONENT_NAMES)
        players = [
            _seat(Player, name, gold, rng.pop_random(start_cities), rng, config)
        ]
        for _ in range(opponents):
            opponent_name = rng.pop_random(names)
            city = rng.pop_random(start_cities)
            players.append(_seat(Opponent, opponent_name, gold, city, rng, config))
        stocks = {
            player.id: Stock(
                id=rng.create_id(),
                name=player.name,
                owning_player_id=player.id,
                constants=config.stock,
            )
            for player in players
        }
        logger.info("Created game for %s against %d opponents", name, opponents)
        return cls(
            data,
            players,
            stocks,
            rng=rng,
            config=config,
            storage=storage,
            logging_config=logging_config,
        )

    @classmethod
    def create_from_storage(
        cls,
        storage: GameStorage,
        *,
        rng: RandomService | None = None,
        config: GameConfiguration | None = None,
        logging_config: LoggingConfiguration | None = None,
    ) -> Nardis:
        """Resume the game saved in *storage*."""
        saved = storage.load()
        current = resolve_by_id(saved.players, saved.current_player_id, "player")
        return cls(
            saved.data,
            saved.players,
            saved.stocks,
            current_player=current,
            turn=saved.turn,
            rng=rng,
            config=config,
            storage=storage,
            logging_config=logging_config,
        )


def _seat(
    kind: type[Player],
    name: str,
    gold: int,
    city: City,
    rng: RandomService,
    config: GameConfiguration,
) -> Player:
    player_id = rng.create_id()
    return kind(
        id=player_id,
        name=name,
        start_gold=gold,
        start_city=city,
        finance=Finance(
            id=rng.create_id(),
            name=f"{name} ledger",
            player_id=player_id,
            gold=gold,
            starting_shares=config.stock.starting_shares,
        ),
    )


__all__ = ["MIN_TRACK_COST", "GameStatus", "Nardis"]
