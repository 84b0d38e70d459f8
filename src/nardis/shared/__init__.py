"""Shared utilities, value objects and cross-cutting helpers."""

from nardis.shared.enums import (
    FinanceGeneralType,
    FinanceType,
    PlayerLevel,
    PlayerType,
    ResourceTier,
    SaveDecision,
    SaveGoal,
    UpgradeType,
)
from nardis.shared.events import EventJournal, GameEvent
from nardis.shared.logging_config import LoggingConfiguration
from nardis.shared.rng import RandomService
from nardis.shared.value_objects import (
    Coordinate,
    FinanceTurnItem,
    ValueHistoryEntry,
    round_half_up,
)

__all__ = [
    "Coordinate",
    "EventJournal",
    "FinanceGeneralType",
    "FinanceTurnItem",
    "FinanceType",
    "GameEvent",
    "LoggingConfiguration",
    "PlayerLevel",
    "PlayerType",
    "RandomService",
    "ResourceTier",
    "SaveDecision",
    "SaveGoal",
    "UpgradeType",
    "ValueHistoryEntry",
    "round_half_up",
]
