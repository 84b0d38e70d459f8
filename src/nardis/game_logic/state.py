"""Shared world collections and the per-turn context handed to entities."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from nardis.game_logic.city import City  # noqa: TC001
from nardis.game_logic.equipment import Train, Upgrade  # noqa: TC001
from nardis.game_logic.resource import Resource  # noqa: TC001
from nardis.shared.rng import RandomService  # noqa: TC001


class GameData(BaseModel):
    """Flat id-indexed collections every turn handler resolves against."""

    cities: list[City] = Field(default_factory=list)
    resources: list[Resource] = Field(default_factory=list)
    trains: list[Train] = Field(default_factory=list)
    upgrades: list[Upgrade] = Field(default_factory=list)

    def start_cities(self) -> list[City]:
        """Return every city small enough to seat a new player."""
        return [city for city in self.cities if city.is_start_city]


class TurnContext(BaseModel):
    """Inputs shared by every turn handler during a single turn."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    turn: int = Field(..., ge=1)
    data: GameData
    rng: RandomService


__all__ = ["GameData", "TurnContext"]
