from __future__ import annotations

from nardis.game_logic.catalog import RANGE_PER_LEVEL
from nardis.game_logic.city import City
from nardis.game_logic.configuration import StockConstants
from nardis.game_logic.equipment import Train, Upgrade
from nardis.game_logic.player import Player
from nardis.game_logic.resource import Resource
from nardis.game_logic.route import Route, RoutePlanCargo
from nardis.game_logic.state import GameData, TurnContext
from nardis.shared.enums import FinanceType, PlayerLevel, UpgradeType
from nardis.shared.rng import RandomService


def _context(turn: int) -> TurnContext:
    return TurnContext(turn=turn, data=GameData(), rng=RandomService(seed=turn))


def _make_player(city: City, gold: int = 1000) -> Player:
    return Player(id="p1", name="Ada", start_gold=gold, start_city=city)


def _make_route(identifier: str, york: City, carlisle: City, train: Train) -> Route:
    return Route(
        id=identifier,
        city_one=york,
        city_two=carlisle,
        train=train,
        route_plan_cargo=RoutePlanCargo(),
        distance=york.distance_to(carlisle),
        cost=464,
        purchased_on_turn=1,
    )


def test_new_player_starts_as_novice_with_ledger(york: City) -> None:
    player = _make_player(york)

    assert player.level is PlayerLevel.NOVICE
    assert player.range == RANGE_PER_LEVEL[PlayerLevel.NOVICE]
    assert player.ledger.gold == 1000
    assert player.ledger.player_id == player.id


def test_player_ledger_holds_the_configured_starting_shares(york: City) -> None:
    constants = StockConstants(starting_shares=7)

    player = Player(
        id="p1",
        name="Ada",
        start_gold=1000,
        start_city=york,
        starting_shares=constants.starting_shares,
    )

    assert player.ledger.holdings == {"p1": 7}
    assert _make_player(york).ledger.holdings == {"p1": 4}


def test_queue_completes_after_turn_cost_turns(
    york: City, carlisle: City, train: Train
) -> None:
    player = _make_player(york)
    route = _make_route("r1", york, carlisle, train)

    assert player.add_route_to_queue(route, turn_cost=2)
    assert york.current_route_count == 1
    assert carlisle.current_route_count == 1

    player.handle_turn(_context(1))
    assert player.routes == []

    player.handle_turn(_context(2))
    assert player.queue == []
    assert player.routes == [route]


def test_queue_rejects_full_cities(
    york: City, carlisle: City, train: Train
) -> None:
    player = _make_player(york)
    carlisle.current_route_count = carlisle.max_concurrent_routes

    assert not player.add_route_to_queue(_make_route("r1", york, carlisle, train), 1)
    assert york.current_route_count == 0


def test_removing_routes_releases_city_slots(
    york: City, carlisle: City, train: Train
) -> None:
    player = _make_player(york)
    player.add_route_to_queue(_make_route("r1", york, carlisle, train), 1)
    player.add_route_to_queue(_make_route("r2", york, carlisle, train), 1)
    player.handle_queue()

    assert player.remove_route_from_routes("r1")
    assert not player.remove_route_from_routes("r1")
    assert york.current_route_count == 1
    assert player.route_count() == 1


def test_level_up_requires_every_threshold(
    york: City, carlisle: City, train: Train
) -> None:
    player = _make_player(york)
    player.routes = [
        _make_route(f"r{index}", york, carlisle, train) for index in range(5)
    ]
    assert not player.check_level()

    player.ledger.add_to_finance_income(FinanceType.RESOURCE, "coal", 3, 150)

    assert player.check_level()
    assert player.level is PlayerLevel.INTERMEDIATE
    assert player.range == RANGE_PER_LEVEL[PlayerLevel.INTERMEDIATE]


def test_master_never_levels_further(york: City) -> None:
    player = _make_player(york)
    player.level = PlayerLevel.MASTER

    assert not player.check_level()


def test_upgrades_are_owned_once(york: City) -> None:
    player = _make_player(york)
    upgrade = Upgrade(
        name="cheaper track", cost=100, value=0.2, type=UpgradeType.TRACK_VALUE_CHEAPER
    )

    assert player.add_upgrade(upgrade)
    assert not player.add_upgrade(upgrade)
    assert player.upgrades_of_type(UpgradeType.TRACK_VALUE_CHEAPER) == [upgrade]


def test_inactive_player_keeps_city_counts(
    york: City, carlisle: City, train: Train
) -> None:
    player = _make_player(york)
    player.add_route_to_queue(_make_route("r1", york, carlisle, train), 1)

    player.set_inactive()

    assert not player.is_active
    assert player.queue == []
    assert york.current_route_count == 1


def test_inactive_player_only_settles_its_ledger(
    york: City, carlisle: City, train: Train
) -> None:
    player = _make_player(york)
    player.ledger.add_to_finance_income(FinanceType.RESOURCE, "coal", 1, 90)
    player.set_inactive()

    player.handle_turn(_context(1))

    assert player.ledger.income.nth_turn == []
    assert player.ledger.turn == 1


def test_round_trip_resolves_every_reference(
    york: City,
    carlisle: City,
    train: Train,
    resources: list[Resource],
) -> None:
    player = _make_player(york)
    upgrade = Upgrade(
        name="cheaper trains", cost=100, value=0.2, type=UpgradeType.TRAIN_VALUE_CHEAPER
    )
    player.add_upgrade(upgrade)
    player.add_route_to_queue(_make_route("r1", york, carlisle, train), 3)
    player.add_route_to_queue(_make_route("r2", york, carlisle, train), 1)
    player.handle_queue()

    restored = Player.from_json(
        player.deconstruct(), [york, carlisle], [train], resources, [upgrade]
    )

    assert restored.equals(player)
    assert restored.start_city is york
    assert restored.upgrades[0] is upgrade
    assert restored.queue[0].turn_cost == 2
    assert restored.routes[0].id == "r2"
    assert restored.routes[0].city_two is carlisle
    assert restored.ledger == player.ledger
