"""Immutable value objects shared across the simulation."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from nardis.shared.enums import FinanceType  # noqa: TC001


def round_half_up(value: float) -> int:
    """Round *value* to the nearest integer, resolving halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class Coordinate(BaseModel):
    """Latitude/longitude pair expressed in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class ValueHistoryEntry(BaseModel):
    """Price observed at a given turn."""

    model_config = ConfigDict(frozen=True)

    value: int
    turn: int = Field(..., ge=0)


class FinanceTurnItem(BaseModel):
    """Single ledger line recorded in a rolling history bucket."""

    model_config = ConfigDict(frozen=True)

    type: FinanceType
    id: str
    amount: int
    value: int
    turn: int = Field(..., ge=0)

    @property
    def total(self) -> int:
        """Return the monetary weight of the entry."""
        return self.amount * self.value


__all__ = [
    "Coordinate",
    "FinanceTurnItem",
    "ValueHistoryEntry",
    "round_half_up",
]
