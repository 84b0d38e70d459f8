"""Shared enumerations used across the simulation."""

from enum import IntEnum, StrEnum


class PlayerLevel(IntEnum):
    """Progression ladder gating trains, upgrades and route range."""

    NONE = 0
    NOVICE = 1
    INTERMEDIATE = 2
    ADVANCED = 3
    MASTER = 4


class PlayerType(StrEnum):
    """Distinguishes the human seat from computer controlled opponents."""

    HUMAN = "human"
    COMPUTER = "computer"


class FinanceType(StrEnum):
    """Ledger categories recorded by a player's finance."""

    RESOURCE = "resource"
    TRACK = "track"
    UPKEEP = "upkeep"
    UPGRADE = "upgrade"
    TRAIN = "train"
    RECOUP = "recoup"
    STOCK_BUY = "stock_buy"
    STOCK_SELL = "stock_sell"


class FinanceGeneralType(StrEnum):
    """Direction of a ledger entry."""

    INCOME = "income"
    EXPENSE = "expense"


class UpgradeType(StrEnum):
    """Effects an upgrade can apply to its owner."""

    TRAIN_VALUE_CHEAPER = "train_value_cheaper"
    TRAIN_UPKEEP_CHEAPER = "train_upkeep_cheaper"
    TRAIN_SPEED_QUICKER = "train_speed_quicker"
    TRACK_VALUE_CHEAPER = "track_value_cheaper"
    TURN_COST_CHEAPER = "turn_cost_cheaper"


class ResourceTier(StrEnum):
    """Yield tiers controlling a resource's price range and weight."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SaveGoal(StrEnum):
    """Objective an opponent is accumulating gold towards."""

    NONE = "none"
    LEVEL_UP = "level_up"
    BUYOUT = "buyout"


class SaveDecision(StrEnum):
    """Outcome of checking a save plan at the start of an opponent action."""

    PROCEED = "proceed"
    WAIT = "wait"
    RESUME = "resume"


__all__ = [
    "FinanceGeneralType",
    "FinanceType",
    "PlayerLevel",
    "PlayerType",
    "ResourceTier",
    "SaveDecision",
    "SaveGoal",
    "UpgradeType",
]
