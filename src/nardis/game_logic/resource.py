"""Tradeable resources whose price follows a biased random walk."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from nardis.game_logic.catalog import (
    MAX_VALUE_HISTORY_LENGTH,
    RESOURCE_VALUE_DECISION_TARGET,
)
from nardis.shared.enums import ResourceTier
from nardis.shared.value_objects import ValueHistoryEntry, round_half_up

if TYPE_CHECKING:
    from nardis.game_logic.state import TurnContext
    from nardis.shared.rng import RandomService


class Resource(BaseModel):
    """A commodity carried by trains and priced per unit.

    The price drifts every few turns: a decider accumulates small random
    steps and, once it crosses the decision target, a new value is drawn and
    committed if it differs from the last recorded one. Prices never leave
    the ``[min_value, max_value]`` band.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    tier: ResourceTier = ResourceTier.MEDIUM
    weight: int = Field(..., ge=1)
    value: int
    min_value: int
    max_value: int
    value_volatility: float = Field(..., ge=0, le=1)
    value_change_decider: float = 0
    value_history: list[ValueHistoryEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_bounds(self) -> Resource:
        """Ensure the price lies within its band and seed the history."""
        if not self.min_value <= self.value <= self.max_value:
            msg = (
                f"Resource {self.name} value {self.value} is outside "
                f"[{self.min_value}, {self.max_value}]."
            )
            raise ValueError(msg)
        if not self.value_history:
            self.value_history.append(ValueHistoryEntry(value=self.value, turn=1))
        return self

    def equals(self, other: object) -> bool:
        """Return ``True`` when *other* is the same resource."""
        return getattr(other, "id", None) == self.id

    def handle_turn(self, context: TurnContext) -> None:
        """Advance the price random walk by one turn."""
        if self.value_change_decider + self.value_volatility >= (
            RESOURCE_VALUE_DECISION_TARGET
        ) and self._set_new_value(self._new_value(context.rng), context.turn):
            self.value_change_decider = 0
        else:
            steps = max(1, round_half_up(self.value_volatility * 10))
            self.value_change_decider += context.rng.random_number(1, steps) / 10

    def _new_value(self, rng: RandomService) -> int:
        steps = round_half_up(self.value_volatility * 10)
        max_sign = -1 if rng.random_number(0, 9) <= steps else 1
        sign = -1 if rng.random_number(0, 9) >= 5 else 1
        if self.value >= self.max_value:
            candidate = self.value + rng.random_number(1, 3) * max_sign
            return min(candidate, self.max_value)
        candidate = self.value + rng.random_number(2, 5) * sign
        return max(self.min_value, min(candidate, self.max_value))

    def _set_new_value(self, value: int, turn: int) -> bool:
        if self.value_history[-1].value == value:
            return False
        self.value_history.append(ValueHistoryEntry(value=value, turn=turn))
        if len(self.value_history) > MAX_VALUE_HISTORY_LENGTH:
            del self.value_history[: -MAX_VALUE_HISTORY_LENGTH]
        self.value = value
        return True

    def deconstruct(self) -> str:
        """Return the JSON record describing this resource."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: str) -> Resource:
        """Rebuild a resource from :meth:`deconstruct` output."""
        return cls.model_validate_json(raw)


__all__ = ["Resource"]
