"""Static rule tables and blueprints used to generate and run a game.

Blueprints describe the randomisable ranges a generated entity is drawn
from; lookup tables encode the progression, capacity and cost rules that are
fixed for every game.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from nardis.shared.enums import PlayerLevel, ResourceTier, UpgradeType
from nardis.shared.value_objects import Coordinate

IntRange = tuple[int, int]

MAX_VALUE_HISTORY_LENGTH = 100
MAX_START_CITY_SIZE = 2
CITY_GROWTH_DECISION_TARGET = 5
RESOURCE_VALUE_DECISION_TARGET = 1
MAX_CITY_SIZE = 6
MAP_RADIUS_IN_KILOMETERS = 6371
MAX_ROUTE_QUEUE = 5
CITY_NAME_LENGTH: IntRange = (4, 7)
TRAIN_NAME_LENGTH: IntRange = (3, 5)


class ResourceBlueprint(BaseModel):
    """Declared ranges a resource is rolled from at game start."""

    model_config = ConfigDict(frozen=True)

    name: str
    tier: ResourceTier
    weight: int = Field(..., ge=1)
    value: IntRange
    min_value: int
    max_value: int
    value_volatility: IntRange


class TrainBlueprint(BaseModel):
    """Declared stat ranges a train model is rolled from at game start."""

    model_config = ConfigDict(frozen=True)

    cost: IntRange
    upkeep: IntRange
    speed: IntRange
    cargo_space: IntRange
    level_required: PlayerLevel


class UpgradeBlueprint(BaseModel):
    """Fixed catalog entry describing an upgrade."""

    model_config = ConfigDict(frozen=True)

    name: str
    cost: int
    value: float
    type: UpgradeType
    level_required: PlayerLevel


class LevelRequirement(BaseModel):
    """Thresholds a player must meet to be promoted into a level."""

    model_config = ConfigDict(frozen=True)

    routes: int = Field(..., ge=0)
    revenue_per_turn: int = Field(..., ge=0)
    gold: int = Field(..., ge=0)


LEVEL_UP_REQUIREMENTS: dict[PlayerLevel, LevelRequirement] = {
    PlayerLevel.NONE: LevelRequirement(routes=0, revenue_per_turn=0, gold=0),
    PlayerLevel.NOVICE: LevelRequirement(routes=2, revenue_per_turn=50, gold=0),
    PlayerLevel.INTERMEDIATE: LevelRequirement(
        routes=5, revenue_per_turn=150, gold=500
    ),
    PlayerLevel.ADVANCED: LevelRequirement(
        routes=10, revenue_per_turn=300, gold=850
    ),
    PlayerLevel.MASTER: LevelRequirement(
        routes=15, revenue_per_turn=500, gold=1000
    ),
}

RANGE_PER_LEVEL: dict[PlayerLevel, int] = {
    PlayerLevel.NONE: 0,
    PlayerLevel.NOVICE: 125,
    PlayerLevel.INTERMEDIATE: 170,
    PlayerLevel.ADVANCED: 230,
    PlayerLevel.MASTER: 300,
}

# Resource basket size and supply amount range per city size (index size - 1).
RESOURCES_PER_SIZE: tuple[int, ...] = (2, 3, 3, 4, 5, 5)
RESOURCE_AMOUNT_PER_SIZE: tuple[IntRange, ...] = (
    (4, 6),
    (6, 8),
    (8, 12),
    (12, 16),
    (16, 20),
    (20, 25),
)

MAX_CONCURRENT_ROUTES_PER_SIZE: dict[int, int] = {
    0: 0,
    1: 2,
    2: 4,
    3: 7,
    4: 11,
    5: 15,
    6: 20,
}

# Build time in turns for a track of a given distance, as half-open ranges.
ROUTE_TURN_COST: tuple[tuple[int, int, int], ...] = (
    (0, 100, 1),
    (100, 175, 2),
    (175, 210, 3),
    (210, 260, 4),
)
MAX_ROUTE_TURN_COST = 5

CITY_SIZES: tuple[int, ...] = (
    6, 5, 5, 5, 4, 4, 4, 3, 3, 3, 3, 2, 2, 2, 2, 2, 2, 1, 1, 1, 1,
)  # fmt: skip

CITY_COORDINATES: tuple[Coordinate, ...] = tuple(
    Coordinate(latitude=latitude, longitude=longitude)
    for latitude, longitude in (
        (54.88, -2.93),
        (54.4863, 0.6133),
        (51.1337, 1.3),
        (50.7004, -3.53),
        (52.9333, -1.5),
        (52.6304, 1.3),
        (51.7704, -1.25),
        (52.2004, 0.1166),
        (55.0004, -1.6),
        (53.9704, -1.08),
        (52.9703, -1.17),
        (50.8303, -0.17),
        (50.9, -1.4),
        (50.3854, -4.16),
        (52.63, -1.1332),
        (51.45, -2.5833),
        (53.83, -1.58),
        (53.5004, -2.248),
        (53.416, -2.918),
        (52.475, -1.92),
        (51.5, -0.1167),
    )
)

OPPONENT_NAMES: tuple[str, ...] = (
    "J. Hamilton",
    "C. H. Pryce",
    "R. Hendrix",
    "P. Peterson",
    "H. Underfoot",
)

UPGRADE_CATALOG: tuple[UpgradeBlueprint, ...] = (
    UpgradeBlueprint(
        name="20% off all new Train purchases",
        cost=100,
        value=0.2,
        type=UpgradeType.TRAIN_VALUE_CHEAPER,
        level_required=PlayerLevel.NOVICE,
    ),
    UpgradeBlueprint(
        name="20% off all new Route purchases",
        cost=100,
        value=0.2,
        type=UpgradeType.TRACK_VALUE_CHEAPER,
        level_required=PlayerLevel.NOVICE,
    ),
    UpgradeBlueprint(
        name="10% speed bonus to all Trains",
        cost=200,
        value=0.1,
        type=UpgradeType.TRAIN_SPEED_QUICKER,
        level_required=PlayerLevel.INTERMEDIATE,
    ),
    UpgradeBlueprint(
        name="10% off upkeep on >= 10G/Turn Trains",
        cost=200,
        value=0.1,
        type=UpgradeType.TRAIN_UPKEEP_CHEAPER,
        level_required=PlayerLevel.INTERMEDIATE,
    ),
    UpgradeBlueprint(
        name="Routes are 1 turn quicker to build",
        cost=250,
        value=1,
        type=UpgradeType.TURN_COST_CHEAPER,
        level_required=PlayerLevel.ADVANCED,
    ),
    UpgradeBlueprint(
        name="Routes are 1 turn quicker to build",
        cost=250,
        value=1,
        type=UpgradeType.TURN_COST_CHEAPER,
        level_required=PlayerLevel.ADVANCED,
    ),
    UpgradeBlueprint(
        name="10% off all new Train purchases",
        cost=300,
        value=0.1,
        type=UpgradeType.TRAIN_VALUE_CHEAPER,
        level_required=PlayerLevel.MASTER,
    ),
    UpgradeBlueprint(
        name="10% speed bonus to all Trains",
        cost=300,
        value=0.1,
        type=UpgradeType.TRAIN_SPEED_QUICKER,
        level_required=PlayerLevel.MASTER,
    ),
)


def _train(
    cost: IntRange,
    upkeep: IntRange,
    speed: IntRange,
    cargo_space: IntRange,
    level: PlayerLevel,
) -> TrainBlueprint:
    return TrainBlueprint(
        cost=cost,
        upkeep=upkeep,
        speed=speed,
        cargo_space=cargo_space,
        level_required=level,
    )


TRAIN_CATALOG: tuple[TrainBlueprint, ...] = (
    _train((90, 110), (3, 5), (40, 50), (4, 4), PlayerLevel.NOVICE),
    _train((130, 150), (6, 11), (60, 80), (4, 5), PlayerLevel.NOVICE),
    _train((150, 160), (6, 11), (60, 80), (5, 5), PlayerLevel.NOVICE),
    _train((190, 210), (10, 15), (100, 120), (5, 5), PlayerLevel.INTERMEDIATE),
    _train((240, 260), (20, 25), (130, 140), (6, 7), PlayerLevel.INTERMEDIATE),
    _train((270, 300), (30, 35), (140, 160), (6, 7), PlayerLevel.INTERMEDIATE),
    _train((310, 330), (40, 45), (160, 180), (8, 9), PlayerLevel.ADVANCED),
    _train((330, 350), (50, 55), (180, 200), (8, 9), PlayerLevel.ADVANCED),
    _train((400, 450), (56, 60), (210, 250), (10, 12), PlayerLevel.MASTER),
    _train((460, 500), (60, 65), (250, 280), (10, 14), PlayerLevel.MASTER),
)


def _resource(
    name: str,
    tier: ResourceTier,
    weight: int,
    value: IntRange,
    bounds: IntRange,
    volatility: IntRange,
) -> ResourceBlueprint:
    return ResourceBlueprint(
        name=name,
        tier=tier,
        weight=weight,
        value=value,
        min_value=bounds[0],
        max_value=bounds[1],
        value_volatility=volatility,
    )


RESOURCE_CATALOG: tuple[ResourceBlueprint, ...] = (
    _resource("medicine", ResourceTier.HIGH, 5, (90, 180), (86, 200), (3, 7)),
    _resource("technology", ResourceTier.HIGH, 5, (90, 155), (86, 200), (1, 4)),
    _resource("arms", ResourceTier.HIGH, 6, (140, 160), (100, 300), (1, 4)),
    _resource("grain", ResourceTier.MEDIUM, 2, (30, 45), (30, 55), (3, 7)),
    _resource("textiles", ResourceTier.MEDIUM, 2, (25, 35), (20, 45), (3, 7)),
    _resource("beer", ResourceTier.MEDIUM, 2, (15, 35), (14, 45), (5, 7)),
    _resource("ore", ResourceTier.MEDIUM, 3, (25, 80), (25, 80), (3, 5)),
    _resource("paper", ResourceTier.MEDIUM, 3, (35, 55), (35, 80), (4, 7)),
    _resource("coal", ResourceTier.MEDIUM, 4, (45, 75), (45, 85), (4, 7)),
    _resource("oil", ResourceTier.MEDIUM, 4, (50, 75), (50, 85), (4, 7)),
    _resource("passengers", ResourceTier.LOW, 1, (10, 15), (5, 15), (4, 7)),
    _resource("mail", ResourceTier.LOW, 1, (10, 15), (5, 15), (4, 7)),
)


def route_turn_cost(distance: int) -> int:
    """Return the number of turns needed to build a track of *distance* km."""
    for lower, upper, turns in ROUTE_TURN_COST:
        if lower <= distance < upper:
            return turns
    return MAX_ROUTE_TURN_COST


def next_level(level: PlayerLevel) -> PlayerLevel | None:
    """Return the level following *level*, or ``None`` at the top of the ladder."""
    if level >= PlayerLevel.MASTER:
        return None
    return PlayerLevel(level + 1)


__all__ = [
    "CITY_COORDINATES",
    "CITY_GROWTH_DECISION_TARGET",
    "CITY_NAME_LENGTH",
    "CITY_SIZES",
    "LEVEL_UP_REQUIREMENTS",
    "MAP_RADIUS_IN_KILOMETERS",
    "MAX_CITY_SIZE",
    "MAX_CONCURRENT_ROUTES_PER_SIZE",
    "MAX_ROUTE_QUEUE",
    "MAX_ROUTE_TURN_COST",
    "MAX_START_CITY_SIZE",
    "MAX_VALUE_HISTORY_LENGTH",
    "OPPONENT_NAMES",
    "RANGE_PER_LEVEL",
    "RESOURCES_PER_SIZE",
    "RESOURCE_AMOUNT_PER_SIZE",
    "RESOURCE_CATALOG",
    "RESOURCE_VALUE_DECISION_TARGET",
    "ROUTE_TURN_COST",
    "TRAIN_CATALOG",
    "TRAIN_NAME_LENGTH",
    "UPGRADE_CATALOG",
    "IntRange",
    "LevelRequirement",
    "ResourceBlueprint",
    "TrainBlueprint",
    "UpgradeBlueprint",
    "next_level",
    "route_turn_cost",
]
