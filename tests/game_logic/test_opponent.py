from __future__ import annotations

from collections.abc import Callable

import pytest

from nardis.game_logic.city import City, CityResource
from nardis.game_logic.equipment import Train, Upgrade
from nardis.game_logic.game import Nardis
from nardis.game_logic.offers import AdjustedTrain, PotentialRoute
from nardis.game_logic.opponent import Opponent, SavePlan, evaluate_save_plan
from nardis.game_logic.player import Player
from nardis.game_logic.resource import Resource
from nardis.game_logic.route import Route, RouteCargo, RoutePlanCargo
from nardis.game_logic.state import GameData, TurnContext
from nardis.game_logic.stock import Stock
from nardis.shared.enums import (
    FinanceType,
    PlayerLevel,
    ResourceTier,
    SaveDecision,
    SaveGoal,
    UpgradeType,
)

CityFactory = Callable[..., City]


@pytest.fixture
def whitby(
    make_city: CityFactory, coal: Resource, passengers: Resource, medicine: Resource
) -> City:
    return make_city(
        "whitby",
        54.48,
        -0.61,
        supply=[
            CityResource(resource=coal, amount=8, available=8),
            CityResource(resource=passengers, amount=6, available=6),
        ],
        demand=[CityResource.demanded(medicine)],
    )


@pytest.fixture
def upgrades() -> list[Upgrade]:
    return [
        Upgrade(
            id="cheaper-trains",
            name="20% off all new Train purchases",
            cost=100,
            value=0.2,
            type=UpgradeType.TRAIN_VALUE_CHEAPER,
        ),
        Upgrade(
            id="cheaper-tracks",
            name="20% off all new Route purchases",
            cost=100,
            value=0.2,
            type=UpgradeType.TRACK_VALUE_CHEAPER,
        ),
        Upgrade(
            id="quicker-trains",
            name="10% speed bonus to all Trains",
            cost=200,
            value=0.1,
            type=UpgradeType.TRAIN_SPEED_QUICKER,
            level_required=PlayerLevel.INTERMEDIATE,
        ),
    ]


def _make_game(
    human_city: City,
    opponent_city: City,
    cities: list[City],
    resources: list[Resource],
    trains: list[Train],
    upgrades: list[Upgrade],
    *,
    opponent_gold: int = 1000,
) -> tuple[Nardis, Player, Opponent]:
    human = Player(id="human", name="Ada", start_gold=1000, start_city=human_city)
    opponent = Opponent(
        id="opponent",
        name="J. Hamilton",
        start_gold=opponent_gold,
        start_city=opponent_city,
    )
    stocks = {
        player.id: Stock(name=player.name, owning_player_id=player.id)
        for player in (human, opponent)
    }
    data = GameData(
        cities=cities, resources=resources, trains=trains, upgrades=upgrades
    )
    return Nardis(data, [human, opponent], stocks), human, opponent


def _context(game: Nardis, turn: int | None = None) -> TurnContext:
    return TurnContext(turn=turn or game.turn, data=game.data, rng=game.rng)


def test_save_plan_decisions() -> None:
    idle = SavePlan()
    saving = SavePlan(goal=SaveGoal.LEVEL_UP, turn=3, duration=5)

    assert evaluate_save_plan(idle, 10) is SaveDecision.PROCEED
    assert evaluate_save_plan(saving, 7) is SaveDecision.WAIT
    assert evaluate_save_plan(saving, 8) is SaveDecision.RESUME
    assert saving.expires_on() == 8


def test_fresh_opponent_net_worth_counts_its_own_shares(
    york: City,
    whitby: City,
    resources: list[Resource],
    train: Train,
    upgrades: list[Upgrade],
) -> None:
    _, _, opponent = _make_game(
        york, whitby, [york, whitby], resources, [train], upgrades, opponent_gold=750
    )

    assert opponent.ledger.net_worth == 750 + 4 * (4 * 20 + 100)


def test_suggested_train_prefers_price_to_performance(train: Train, york: City) -> None:
    roomy = Train(id="roomy", name="Roomy", cost=150, upkeep=8, speed=70, cargo_space=5)
    quick = Train(
        id="quick",
        name="Quick",
        cost=200,
        upkeep=12,
        speed=110,
        cargo_space=5,
        level_required=PlayerLevel.INTERMEDIATE,
    )
    offers = [
        AdjustedTrain(train=item, cost=item.cost) for item in (train, roomy, quick)
    ]
    opponent = Opponent(name="C. H. Pryce", start_gold=1000, start_city=york)

    assert opponent.get_suggested_train(offers).train is train

    opponent.level = PlayerLevel.INTERMEDIATE
    assert opponent.get_suggested_train(offers).train is quick


def test_suggested_cargo_fills_space_with_demanded_goods(
    york: City, whitby: City, coal: Resource, passengers: Resource
) -> None:
    opponent = Opponent(name="R. Hendrix", start_gold=1000, start_city=york)

    cargo = opponent.get_suggested_cargo(whitby, york, 9)

    assert [(item.resource, item.target_amount) for item in cargo] == [
        (coal, 2),
        (passengers, 1),
    ]


def test_suggested_cargo_pads_with_low_yield_goods(
    york: City, carlisle: City, mail: Resource, passengers: Resource
) -> None:
    opponent = Opponent(name="R. Hendrix", start_gold=1000, start_city=york)

    cargo = opponent.get_suggested_cargo(york, carlisle, 5)

    assert [(item.resource, item.target_amount) for item in cargo] == [
        (mail, 3),
        (passengers, 2),
    ]


def test_power_counts_only_demanded_cargo(
    york: City,
    carlisle: City,
    train: Train,
    passengers: Resource,
    mail: Resource,
    coal: Resource,
) -> None:
    opponent = Opponent(name="P. Peterson", start_gold=1000, start_city=york)
    route = PotentialRoute(
        city_one=york,
        city_two=carlisle,
        distance=232,
        gold_cost=464,
        turn_cost=4,
        purchased_on_turn=1,
    )
    plan = RoutePlanCargo(
        city_one=[
            RouteCargo(resource=passengers, target_amount=2),
            RouteCargo(resource=mail, target_amount=2),
        ],
        city_two=[
            RouteCargo(resource=coal, target_amount=2),
            RouteCargo(resource=passengers, target_amount=5),
        ],
    )

    power = opponent.get_power(route, train, plan)

    assert power.full_revolution_in_turns == 10
    assert power.expected_profit_value == 44 + 100 - 14 * 4
    assert power.power_index == pytest.approx(8.8)


def test_opponent_turn_buys_upgrades_and_queues_a_route(
    york: City,
    whitby: City,
    resources: list[Resource],
    train: Train,
    upgrades: list[Upgrade],
) -> None:
    game, _, opponent = _make_game(
        york, whitby, [york, whitby], resources, [train], upgrades
    )

    game.end_turn()

    assert {upgrade.id for upgrade in opponent.upgrades} == {
        "cheaper-trains",
        "cheaper-tracks",
    }
    assert len(opponent.queue) == 1
    route = opponent.queue[0].route
    assert route.city_one is whitby
    assert route.city_two is york
    assert route.route_plan_cargo.city_one[0].resource.id == "coal"
    expected_gold = 1000 - 200 - route.cost - 80
    assert opponent.ledger.gold == expected_gold
    assert whitby.current_route_count == 1
    assert game.turn == 2


def test_waiting_opponent_stays_idle(
    york: City,
    whitby: City,
    resources: list[Resource],
    train: Train,
    upgrades: list[Upgrade],
) -> None:
    game, _, opponent = _make_game(
        york, whitby, [york, whitby], resources, [train], upgrades
    )
    opponent.save = SavePlan(goal=SaveGoal.LEVEL_UP, turn=1, duration=5)

    opponent.deduce_action(_context(game, 3), game)

    assert opponent.upgrades == []
    assert opponent.queue == []


def test_expired_level_up_save_resumes_acting(
    york: City,
    whitby: City,
    resources: list[Resource],
    train: Train,
    upgrades: list[Upgrade],
) -> None:
    game, _, opponent = _make_game(
        york, whitby, [york, whitby], resources, [train], upgrades
    )
    opponent.save = SavePlan(goal=SaveGoal.LEVEL_UP, turn=1, duration=5)

    opponent.deduce_action(_context(game, 6), game)

    assert not opponent.save.is_saving
    assert len(opponent.upgrades) == 2


def test_opponent_saves_for_level_up_when_short_of_gold(
    york: City,
    whitby: City,
    resources: list[Resource],
    train: Train,
    upgrades: list[Upgrade],
) -> None:
    game, _, opponent = _make_game(
        york, whitby, [york, whitby], resources, [train], upgrades, opponent_gold=0
    )
    opponent.routes = [
        Route(
            id=f"r{index}",
            city_one=whitby,
            city_two=york,
            train=train,
            route_plan_cargo=RoutePlanCargo(),
            distance=whitby.distance_to(york),
            cost=150,
            purchased_on_turn=1,
        )
        for index in range(5)
    ]
    opponent.ledger.add_to_finance_income(FinanceType.RESOURCE, "coal", 3, 150)

    assert not opponent.should_purchase_routes(4, game)
    assert opponent.save.goal is SaveGoal.LEVEL_UP
    assert opponent.save.turn == 4
    assert opponent.save.duration == game.config.save_duration


def test_unprofitable_routes_are_demolished(
    york: City,
    whitby: City,
    resources: list[Resource],
    train: Train,
    upgrades: list[Upgrade],
) -> None:
    game, _, opponent = _make_game(
        york, whitby, [york, whitby], resources, [train], upgrades
    )
    route = Route(
        id="loser",
        city_one=whitby,
        city_two=york,
        train=train,
        route_plan_cargo=RoutePlanCargo(),
        distance=whitby.distance_to(york),
        cost=150,
        purchased_on_turn=1,
        profit=-10,
    )
    opponent.add_route_to_queue(route, 1)
    opponent.handle_queue()
    cutoff = route.purchased_on_turn + route.revolution_turns() * 2

    assert opponent.delete_consistently_unprofitable_routes(cutoff - 1, game) == 0
    assert opponent.delete_consistently_unprofitable_routes(cutoff, game) == 1
    assert opponent.routes == []
    assert opponent.ledger.gold == 1000 + 75
    assert whitby.current_route_count == 0


def test_advanced_opponent_saves_for_an_unaffordable_buyout(
    york: City,
    whitby: City,
    resources: list[Resource],
    train: Train,
    upgrades: list[Upgrade],
) -> None:
    game, human, opponent = _make_game(
        york, whitby, [york, whitby], resources, [train], upgrades, opponent_gold=10
    )
    opponent.level = PlayerLevel.ADVANCED
    stock = game.stocks[human.id]
    for _ in range(6):
        stock.buy_stock(opponent.id)

    assert opponent.buy_out_cost(stock) == 4 * stock.sell_value()
    assert not opponent.check_if_any_player_can_be_bought_out(5, game)
    assert opponent.save.goal is SaveGoal.BUYOUT
    assert opponent.save.target_id == human.id


def test_round_trip_keeps_the_save_plan(
    york: City,
    whitby: City,
    train: Train,
    resources: list[Resource],
    upgrades: list[Upgrade],
) -> None:
    opponent = Opponent(name="H. Underfoot", start_gold=500, start_city=whitby)
    opponent.save = SavePlan(
        goal=SaveGoal.BUYOUT, target_id="human", turn=4, duration=5
    )

    restored = Opponent.from_json(
        opponent.deconstruct(), [york, whitby], [train], resources, upgrades
    )

    assert isinstance(restored, Opponent)
    assert restored.save == opponent.save
    assert restored.start_city is whitby
