"""Priced offers a player can choose from when extending its network."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from nardis.game_logic.city import City  # noqa: TC001
from nardis.game_logic.equipment import Train  # noqa: TC001
from nardis.game_logic.route import RoutePlanCargo  # noqa: TC001


class AdjustedTrain(BaseModel):
    """A train model priced for a specific player."""

    model_config = ConfigDict(frozen=True)

    train: Train
    cost: int = Field(..., ge=1)


class RouteCost(BaseModel):
    """Gold and build time of a track after a player's upgrades."""

    model_config = ConfigDict(frozen=True)

    gold_cost: int = Field(..., ge=0)
    turn_cost: int = Field(..., ge=1)


class PotentialRoute(BaseModel):
    """A track a player could build from ``city_one`` to ``city_two``."""

    city_one: City
    city_two: City
    distance: int = Field(..., gt=0)
    gold_cost: int = Field(..., ge=0)
    turn_cost: int = Field(..., ge=1)
    purchased_on_turn: int = Field(..., ge=1)


class BuyableRoute(PotentialRoute):
    """A potential route completed with a train and a cargo plan."""

    train: Train
    train_cost: int = Field(..., ge=0)
    route_plan_cargo: RoutePlanCargo

    @property
    def total_cost(self) -> int:
        """Return the combined price of the track and the train."""
        return self.gold_cost + self.train_cost


__all__ = ["AdjustedTrain", "BuyableRoute", "PotentialRoute", "RouteCost"]
