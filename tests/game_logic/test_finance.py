from __future__ import annotations

from nardis.game_logic.configuration import NetWorthDivisors
from nardis.game_logic.equipment import Train, Upgrade
from nardis.game_logic.finance import Finance, train_upkeep
from nardis.game_logic.stock import Stock
from nardis.shared.enums import FinanceType, PlayerLevel, UpgradeType


def _make_finance(gold: int = 1000) -> Finance:
    return Finance(name="ledger", player_id="p1", gold=gold)


def test_removing_an_expense_restores_gold_exactly() -> None:
    finance = _make_finance()

    finance.add_to_finance_expense(FinanceType.TRACK, "route-1", 1, 200)

    assert finance.gold == 800
    assert finance.total_profits == -200
    assert finance.total_history[FinanceType.TRACK.value] == 200

    assert finance.remove_from_finance_expense(FinanceType.TRACK, "route-1")
    assert finance.gold == 1000
    assert finance.total_profits == 0
    assert finance.total_history[FinanceType.TRACK.value] == 0


def test_removing_unknown_expense_is_declined() -> None:
    finance = _make_finance()

    assert not finance.remove_from_finance_expense(FinanceType.TRAIN, "missing")
    assert finance.gold == 1000


def test_new_ledger_holds_starting_shares_and_net_worth() -> None:
    finance = _make_finance(500)

    assert finance.holdings == {"p1": 4}
    assert finance.net_worth == 500
    assert finance.total_profits == 0


def test_total_profits_tracks_income_minus_expense() -> None:
    finance = _make_finance()

    finance.add_to_finance_income(FinanceType.RESOURCE, "coal", 3, 50)
    finance.add_to_finance_expense(FinanceType.UPKEEP, "train", 1, 20)

    assert finance.gold == 1130
    assert finance.total_profits == 130
    assert finance.total_history["coal"] == 150


def test_history_window_rolls_three_turns() -> None:
    finance = _make_finance()
    finance.add_to_finance_income(FinanceType.RESOURCE, "coal", 1, 90)
    for _ in range(3):
        finance.income.shift()

    assert all(not bucket for bucket in finance.income.buckets())
    assert finance.average_revenue() == 0


def test_average_revenue_spans_the_window() -> None:
    finance = _make_finance()
    finance.add_to_finance_income(FinanceType.RESOURCE, "coal", 1, 90)
    finance.income.shift()
    finance.add_to_finance_income(FinanceType.RESOURCE, "coal", 1, 60)

    assert finance.average_revenue() == 50


def test_upkeep_discount_is_applied_per_upgrade() -> None:
    train = Train(name="Hauler", cost=300, upkeep=40, speed=150, cargo_space=8)
    upgrade = Upgrade(
        name="cheaper upkeep",
        cost=200,
        value=0.1,
        type=UpgradeType.TRAIN_UPKEEP_CHEAPER,
        level_required=PlayerLevel.INTERMEDIATE,
    )

    assert train_upkeep(train, [upgrade]) == 36
    assert train_upkeep(train, [upgrade, upgrade]) == 33


def test_stock_trades_adjust_holdings_and_gold() -> None:
    finance = _make_finance()

    finance.buy_stock("p2", 125)
    finance.sell_stock("p2", 100)

    assert finance.holdings["p2"] == 0
    assert finance.gold == 975


def test_net_worth_discounts_each_asset_class() -> None:
    finance = _make_finance(900)
    stock = Stock(name="p1", owning_player_id="p1")
    upgrade = Upgrade(
        name="cheaper trains",
        cost=100,
        value=0.2,
        type=UpgradeType.TRAIN_VALUE_CHEAPER,
    )

    worth = finance.update_net_worth([], [], [upgrade], {"p1": stock})

    assert worth == 900 + 40 + 4 * 180
    assert finance.net_worth == worth


def test_net_worth_accepts_custom_divisors() -> None:
    finance = _make_finance(900)

    worth = finance.update_net_worth([], [], [], {}, NetWorthDivisors(gold=3))

    assert worth == 300


def test_round_trip_preserves_history() -> None:
    finance = _make_finance()
    finance.add_to_finance_expense(FinanceType.TRACK, "route-1", 1, 120)
    finance.income.shift()

    restored = Finance.from_json(finance.deconstruct())

    assert restored == finance


def test_ledger_seeds_the_given_starting_shares() -> None:
    finance = Finance(name="ledger", player_id="p1", gold=500, starting_shares=6)

    assert finance.holdings == {"p1": 6}
    assert "starting_shares" not in finance.deconstruct()
    assert Finance.from_json(finance.deconstruct()).holdings == {"p1": 6}
