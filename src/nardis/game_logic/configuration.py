"""Tunable game parameters for new and restored games."""

from __future__ import annotations

import math
from functools import cache

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SAVE = 5


class StockConstants(BaseModel):
    """Parameters of the share valuation formula."""

    model_config = ConfigDict(frozen=True)

    max_stock_amount: int = Field(default=10, ge=1)
    starting_shares: int = Field(default=4, ge=0)
    base_value: int = Field(default=100, ge=0)
    buy_multiplier: float = Field(default=1.25, gt=0)
    route_length_multiplier: float = Field(default=1.8, ge=0)
    stock_holder_multiplier: float = Field(default=20, ge=0)
    avg_revenue_divisor: float = Field(default=35, gt=0)
    total_profits_divisor: float = Field(default=70, gt=0)

    @property
    def initial_value(self) -> int:
        """Return the share price of a freshly listed stock."""
        holders = math.floor(self.starting_shares * self.stock_holder_multiplier)
        return holders + self.base_value


class NetWorthDivisors(BaseModel):
    """Discount applied to each asset class when valuing a player."""

    model_config = ConfigDict(frozen=True)

    gold: float = Field(default=1, gt=0)
    stock: float = Field(default=1, gt=0)
    tracks: float = Field(default=1.5, gt=0)
    train: float = Field(default=2, gt=0)
    upgrade: float = Field(default=2.5, gt=0)


class GameDefaults(BaseSettings):
    """Load default game parameters from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NARDIS_GAME_",
        extra="ignore",
    )

    start_gold: int = Field(default=1000, ge=0)
    start_opponents: int = Field(default=3, ge=0)
    save_duration: int = Field(default=DEFAULT_SAVE, ge=1)
    max_queue_length: int = Field(default=5, ge=1)
    stock_base_value: int = Field(default=100, ge=0)

    def to_config(self) -> GameConfiguration:
        """Convert defaults into an immutable configuration object."""
        return GameConfiguration(
            start_gold=self.start_gold,
            start_opponents=self.start_opponents,
            save_duration=self.save_duration,
            max_queue_length=self.max_queue_length,
            stock=StockConstants(base_value=self.stock_base_value),
        )


class GameOverrides(BaseModel):
    """Optional per-game overrides for the default parameters."""

    model_config = ConfigDict(frozen=True)

    start_gold: int | None = Field(default=None, ge=0)
    start_opponents: int | None = Field(default=None, ge=0)
    save_duration: int | None = Field(default=None, ge=1)
    max_queue_length: int | None = Field(default=None, ge=1)
    stock: StockConstants | None = None
    net_worth: NetWorthDivisors | None = None

    def apply(self, config: GameConfiguration) -> GameConfiguration:
        """Return a copy of *config* with overrides applied."""
        updates = {
            name: getattr(self, name)
            for name in type(self).model_fields
            if getattr(self, name) is not None
        }
        return config.model_copy(update=updates)


class GameConfiguration(BaseModel):
    """Immutable representation of the parameters of a single game."""

    model_config = ConfigDict(frozen=True)

    start_gold: int = Field(default=1000, ge=0)
    start_opponents: int = Field(default=3, ge=0)
    save_duration: int = Field(default=DEFAULT_SAVE, ge=1)
    max_queue_length: int = Field(default=5, ge=1)
    stock: StockConstants = Field(default_factory=StockConstants)
    net_worth: NetWorthDivisors = Field(default_factory=NetWorthDivisors)

    def with_overrides(
        self, overrides: GameOverrides | None = None
    ) -> GameConfiguration:
        """Create a game-specific configuration by applying overrides if provided."""
        if overrides is None:
            return self
        return overrides.apply(self)


@cache
def get_default_game_configuration() -> GameConfiguration:
    """Return the cached default game configuration."""
    return GameDefaults().to_config()


def build_game_configuration(
    overrides: GameOverrides | None = None,
) -> GameConfiguration:
    """Construct a configuration for a game, applying optional overrides."""
    defaults = get_default_game_configuration()
    if overrides is None:
        return defaults
    return overrides.apply(defaults)


__all__ = [
    "DEFAULT_SAVE",
    "GameConfiguration",
    "GameDefaults",
    "GameOverrides",
    "NetWorthDivisors",
    "StockConstants",
    "build_game_configuration",
    "get_default_game_configuration",
]
