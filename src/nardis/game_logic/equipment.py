"""Immutable train models and purchasable upgrades."""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from nardis.shared.enums import PlayerLevel, UpgradeType


class Train(BaseModel):
    """Rolling stock model a route can be operated with."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    cost: int = Field(..., ge=0)
    upkeep: int = Field(..., ge=0)
    speed: int = Field(..., gt=0)
    cargo_space: int = Field(..., ge=0)
    level_required: PlayerLevel = PlayerLevel.NOVICE

    def equals(self, other: object) -> bool:
        """Return ``True`` when *other* is the same train model."""
        return getattr(other, "id", None) == self.id

    def deconstruct(self) -> str:
        """Return the JSON record describing this train."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: str) -> Train:
        """Rebuild a train from :meth:`deconstruct` output."""
        return cls.model_validate_json(raw)


class Upgrade(BaseModel):
    """Permanent player perk bought once and applied to every route."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    cost: int = Field(..., ge=0)
    value: float = Field(..., ge=0)
    type: UpgradeType
    level_required: PlayerLevel = PlayerLevel.NOVICE

    def equals(self, other: object) -> bool:
        """Return ``True`` when *other* is the same upgrade."""
        return getattr(other, "id", None) == self.id

    def deconstruct(self) -> str:
        """Return the JSON record describing this upgrade."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: str) -> Upgrade:
        """Rebuild an upgrade from :meth:`deconstruct` output."""
        return cls.model_validate_json(raw)


__all__ = ["Train", "Upgrade"]
