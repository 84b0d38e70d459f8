"""Player ledgers: gold, rolling income/expense history and net worth."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from nardis.game_logic.configuration import NetWorthDivisors, StockConstants
from nardis.shared.enums import FinanceGeneralType, FinanceType, UpgradeType
from nardis.shared.value_objects import FinanceTurnItem, round_half_up

if TYPE_CHECKING:
    from nardis.game_logic.equipment import Train, Upgrade
    from nardis.game_logic.route import Route
    from nardis.game_logic.state import TurnContext
    from nardis.game_logic.stock import Stock

logger = logging.getLogger(__name__)

TRACKED_EXPENSES: tuple[FinanceType, ...] = (
    FinanceType.TRAIN,
    FinanceType.TRACK,
    FinanceType.UPKEEP,
    FinanceType.UPGRADE,
)


def train_upkeep(train: Train, upgrades: Sequence[Upgrade]) -> int:
    """Return the per-turn upkeep of *train* after upkeep upgrades."""
    upkeep = train.upkeep
    for upgrade in upgrades:
        if upgrade.type is UpgradeType.TRAIN_UPKEEP_CHEAPER:
            upkeep -= math.floor(upkeep * upgrade.value)
    return upkeep


class FinanceHistory(BaseModel):
    """Three-turn rolling window of ledger entries."""

    nth_turn: list[FinanceTurnItem] = Field(default_factory=list)
    nth_turn_minus_one: list[FinanceTurnItem] = Field(default_factory=list)
    nth_turn_minus_two: list[FinanceTurnItem] = Field(default_factory=list)

    def buckets(self) -> tuple[list[FinanceTurnItem], ...]:
        """Return the buckets from newest to oldest."""
        return (self.nth_turn, self.nth_turn_minus_one, self.nth_turn_minus_two)

    def shift(self) -> None:
        """Age every bucket by one turn, dropping the oldest."""
        self.nth_turn_minus_two = self.nth_turn_minus_one
        self.nth_turn_minus_one = self.nth_turn
        self.nth_turn = []

    def average(self) -> int:
        """Return the mean per-turn total across the window."""
        buckets = self.buckets()
        total = sum(item.total for bucket in buckets for item in bucket)
        return round_half_up(total / len(buckets))


class Finance(BaseModel):
    """Ledger owned by a single player.

    Gold may dip below zero; it is the authoritative balance. ``total_profits``
    always equals lifetime income minus lifetime expense, and ``stocks`` maps
    the owning player id of each stock to the number of shares held.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    player_id: str
    gold: int
    turn: int = Field(default=1, ge=0)
    income: FinanceHistory = Field(default_factory=FinanceHistory)
    expense: FinanceHistory = Field(default_factory=FinanceHistory)
    total_history: dict[str, int] = Field(
        default_factory=lambda: {kind.value: 0 for kind in TRACKED_EXPENSES}
    )
    total_profits: int = 0
    net_worth: int | None = None
    stocks: dict[str, int] | None = None
    starting_shares: int = Field(
        default_factory=lambda: StockConstants().starting_shares, ge=0, exclude=True
    )

    @model_validator(mode="after")
    def _seed_holdings(self) -> Finance:
        """Give the owner its starting shares and an initial valuation."""
        if self.stocks is None:
            self.stocks = {self.player_id: self.starting_shares}
        if self.net_worth is None:
            self.net_worth = self.gold
        return self

    @property
    def holdings(self) -> dict[str, int]:
        """Return the shares held per stock owner."""
        if self.stocks is None:
            self.stocks = {}
        return self.stocks

    def equals(self, other: object) -> bool:
        """Return ``True`` when *other* is the same ledger."""
        return getattr(other, "id", None) == self.id

    def handle_turn(
        self,
        context: TurnContext,
        routes: Sequence[Route] = (),
        upgrades: Sequence[Upgrade] = (),
    ) -> None:
        """Settle route upkeep and deliveries for the turn."""
        self.turn = context.turn
        self.income.shift()
        self.expense.shift()
        for route in routes:
            upkeep = train_upkeep(route.train, upgrades)
            route.subtract_from_profit(upkeep)
            self.add_to_finance_expense(FinanceType.UPKEEP, route.train.id, 1, upkeep)
            state = route.state
            if not state.has_arrived:
                continue
            for cargo in state.cargo:
                if cargo.actual_amount <= 0:
                    continue
                if not state.destination.is_demand(cargo.resource):
                    continue
                route.add_to_profit(cargo.actual_amount * cargo.resource.value)
                self.add_to_finance_income(
                    FinanceType.RESOURCE,
                    cargo.resource.id,
                    cargo.actual_amount,
                    cargo.resource.value,
                )

    def add_to_finance_income(
        self, kind: FinanceType, identifier: str, amount: int, value: int
    ) -> None:
        """Record income and credit gold."""
        item = self._record(FinanceGeneralType.INCOME, kind, identifier, amount, value)
        self.gold += item.total

    def add_to_finance_expense(
        self, kind: FinanceType, identifier: str, amount: int, value: int
    ) -> None:
        """Record an expense and debit gold."""
        item = self._record(FinanceGeneralType.EXPENSE, kind, identifier, amount, value)
        self.gold -= item.total

    def find_expense(
        self, kind: FinanceType, identifier: str
    ) -> FinanceTurnItem | None:
        """Return the first expense in the window matching *kind* and *identifier*."""
        for bucket in self.expense.buckets():
            for item in bucket:
                if item.type is kind and item.id == identifier:
                    return item
        return None

    def remove_from_finance_expense(self, kind: FinanceType, identifier: str) -> bool:
        """Reverse the first recorded expense matching *kind* and *identifier*."""
        for bucket in self.expense.buckets():
            for index, item in enumerate(bucket):
                if item.type is kind and item.id == identifier:
                    del bucket[index]
                    key = self._total_key(kind, identifier)
                    previous = self.total_history.get(key, 0)
                    self.total_history[key] = previous - item.total
                    self.total_profits += item.total
                    self.gold += item.total
                    return True
        logger.debug("No %s expense %s to remove from %s", kind, identifier, self.name)
        return False

    def average_revenue(self) -> int:
        """Return the mean income over the rolling window."""
        return self.income.average()

    def average_expense(self) -> int:
        """Return the mean expense over the rolling window."""
        return self.expense.average()

    def buy_stock(self, owner_id: str, value: int, amount: int = 1) -> None:
        """Add *amount* shares of *owner_id*'s stock, paying *value* if any."""
        self.holdings[owner_id] = self.holdings.get(owner_id, 0) + amount
        if value > 0:
            self.add_to_finance_expense(FinanceType.STOCK_BUY, owner_id, 1, value)

    def sell_stock(self, owner_id: str, value: int, amount: int = 1) -> None:
        """Remove *amount* shares of *owner_id*'s stock, receiving *value* if any."""
        held = self.holdings.get(owner_id, 0)
        self.holdings[owner_id] = max(0, held - amount)
        if value > 0:
            self.add_to_finance_income(FinanceType.STOCK_SELL, owner_id, 1, value)

    def recoup_deleted_route(self, value: int) -> None:
        """Credit the salvage value of a demolished route."""
        recoup = FinanceType.RECOUP
        self.add_to_finance_income(recoup, recoup.value, 1, value)

    def update_net_worth(
        self,
        routes: Sequence[Route],
        queue: Sequence[Route],
        upgrades: Sequence[Upgrade],
        stocks: Mapping[str, Stock],
        divisors: NetWorthDivisors | None = None,
    ) -> int:
        """Recompute and return the discounted value of every asset."""
        divisors = divisors or NetWorthDivisors()
        worth = 0
        for route in (*routes, *queue):
            worth += math.floor(route.cost / divisors.tracks)
            worth += math.floor(route.train.cost / divisors.train)
        for upgrade in upgrades:
            worth += math.floor(upgrade.cost / divisors.upgrade)
        worth += math.floor(self.gold / divisors.gold)
        stock_value = 0
        for owner_id, shares in self.holdings.items():
            stock = stocks.get(owner_id)
            if stock is not None:
                stock_value += shares * stock.sell_value()
        worth += math.floor(stock_value / divisors.stock)
        self.net_worth = worth
        return worth

    def _record(
        self,
        general: FinanceGeneralType,
        kind: FinanceType,
        identifier: str,
        amount: int,
        value: int,
    ) -> FinanceTurnItem:
        item = FinanceTurnItem(
            type=kind, id=identifier, amount=amount, value=value, turn=self.turn
        )
        key = self._total_key(kind, identifier)
        self.total_history[key] = self.total_history.get(key, 0) + item.total
        if general is FinanceGeneralType.INCOME:
            self.total_profits += item.total
            self.income.nth_turn.append(item)
        else:
            self.total_profits -= item.total
            self.expense.nth_turn.append(item)
        return item

    @staticmethod
    def _total_key(kind: FinanceType, identifier: str) -> str:
        return identifier if kind is FinanceType.RESOURCE else kind.value

    def deconstruct(self) -> str:
        """Return the JSON record describing this ledger."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: str) -> Finance:
        """Rebuild a ledger from :meth:`deconstruct` output."""
        return cls.model_validate_json(raw)


__all__ = ["Finance", "FinanceHistory", "TRACKED_EXPENSES", "train_upkeep"]
