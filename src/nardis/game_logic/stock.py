"""Tradeable ownership shares in a player's company."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from nardis.game_logic.catalog import MAX_VALUE_HISTORY_LENGTH
from nardis.game_logic.configuration import StockConstants
from nardis.shared.value_objects import ValueHistoryEntry

if TYPE_CHECKING:
    from nardis.game_logic.finance import Finance


class BuyOutValue(BaseModel):
    """Price of acquiring every share a single holder owns."""

    id: str
    shares: int
    total_value: int


class Stock(BaseModel):
    """Shares issued by a single player.

    The owner starts with ``starting_shares``; rivals may buy until
    ``max_stock_amount`` shares are outstanding. A fully subscribed stock can
    be bought out, which hands the owning company to the acquirer.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    owning_player_id: str
    constants: StockConstants = Field(default_factory=StockConstants)
    value: int | None = None
    value_history: list[ValueHistoryEntry] = Field(default_factory=list)
    supply: dict[str, int] | None = None
    is_active: bool = True

    @model_validator(mode="after")
    def _list_stock(self) -> Stock:
        """Issue the owner's starting shares at the listing price."""
        if self.value is None:
            self.value = self.constants.initial_value
        if self.supply is None:
            self.supply = {self.owning_player_id: self.constants.starting_shares}
        if not self.value_history:
            self.value_history.append(ValueHistoryEntry(value=self.value, turn=1))
        return self

    @property
    def shares(self) -> dict[str, int]:
        """Return the shares held per player id."""
        if self.supply is None:
            self.supply = {}
        return self.supply

    def equals(self, other: object) -> bool:
        """Return ``True`` when *other* is the same stock."""
        return getattr(other, "id", None) == self.id

    def current_amount_of_stock_holders(self) -> int:
        """Return the number of shares currently outstanding."""
        return sum(self.shares.values())

    def is_stock_holder(self, player_id: str) -> bool:
        """Return ``True`` when *player_id* holds at least one share."""
        return self.shares.get(player_id, 0) > 0

    def is_fully_subscribed(self) -> bool:
        """Return ``True`` once every share has been issued."""
        return self.current_amount_of_stock_holders() >= self.constants.max_stock_amount

    def buy_stock(self, player_id: str) -> bool:
        """Issue one share to *player_id* unless the cap is reached."""
        if self.current_amount_of_stock_holders() + 1 > self.constants.max_stock_amount:
            return False
        self.shares[player_id] = self.shares.get(player_id, 0) + 1
        return True

    def sell_stock(self, player_id: str, amount: int = 1) -> bool:
        """Return *amount* shares held by *player_id* to the pool."""
        held = self.shares.get(player_id, 0)
        if held - amount < 0:
            return False
        self.shares[player_id] = held - amount
        return True

    def buy_value(self) -> int:
        """Return the price of acquiring one share."""
        return math.floor((self.value or 0) * self.constants.buy_multiplier)

    def sell_value(self) -> int:
        """Return the price received for selling one share."""
        return self.value or 0

    def get_buy_out_values(self) -> list[BuyOutValue]:
        """Return the cost of acquiring each holder's position.

        Buyouts are only possible once the stock is fully subscribed; until
        then the list is empty.
        """
        if not self.is_fully_subscribed():
            return []
        return [
            BuyOutValue(
                id=player_id,
                shares=shares,
                total_value=math.floor(shares * self.sell_value()),
            )
            for player_id, shares in self.shares.items()
        ]

    def update_value(self, finance: Finance, route_count: int, turn: int) -> bool:
        """Recompute the share price from the owner's performance."""
        if not self.is_active:
            return False
        constants = self.constants
        value = (
            math.floor(route_count * constants.route_length_multiplier)
            + math.floor(finance.average_revenue() / constants.avg_revenue_divisor)
            + math.floor(
                self.current_amount_of_stock_holders()
                * constants.stock_holder_multiplier
            )
            + math.floor(finance.total_profits / constants.total_profits_divisor)
            + constants.base_value
        )
        if value == self.value:
            return False
        self.value = value
        self._record_history(value, turn)
        return True

    def set_inactive(self, turn: int) -> None:
        """Delist the stock after its owner has been taken over."""
        self.value = 0
        self._record_history(0, turn)
        self.is_active = False

    def _record_history(self, value: int, turn: int) -> None:
        last = self.value_history[-1] if self.value_history else None
        entry = ValueHistoryEntry(value=value, turn=turn)
        if last is not None and last.turn == turn:
            self.value_history[-1] = entry
        else:
            self.value_history.append(entry)
        if len(self.value_history) > MAX_VALUE_HISTORY_LENGTH:
            del self.value_history[: -MAX_VALUE_HISTORY_LENGTH]

    def deconstruct(self) -> str:
        """Return the JSON record describing this stock."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: str) -> Stock:
        """Rebuild a stock from :meth:`deconstruct` output."""
        return cls.model_validate_json(raw)


__all__ = ["BuyOutValue", "Stock"]
