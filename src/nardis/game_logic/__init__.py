"""Core rules and mechanics that drive a Nardis game."""

from nardis.game_logic.city import City, CityResource
from nardis.game_logic.configuration import (
    DEFAULT_SAVE,
    GameConfiguration,
    GameDefaults,
    GameOverrides,
    NetWorthDivisors,
    StockConstants,
    build_game_configuration,
    get_default_game_configuration,
)
from nardis.game_logic.equipment import Train, Upgrade
from nardis.game_logic.errors import (
    EntityNotFoundError,
    GameNotFoundError,
    InsufficientStartCitiesError,
    NardisError,
    ResourcePoolExhaustedError,
    RouteCargoError,
)
from nardis.game_logic.finance import Finance, FinanceHistory
from nardis.game_logic.game import GameStatus, Nardis
from nardis.game_logic.generator import WorldGenerator, generate_world
from nardis.game_logic.interfaces import (
    Identifiable,
    Serializable,
    TurnAdvanceable,
    find_by_id,
    resolve_by_id,
)
from nardis.game_logic.offers import (
    AdjustedTrain,
    BuyableRoute,
    PotentialRoute,
    RouteCost,
)
from nardis.game_logic.opponent import Opponent, SavePlan, evaluate_save_plan
from nardis.game_logic.persistence import (
    GameStorage,
    InMemoryKeyValueStore,
    KeyValueStore,
    SavedGame,
    StorageKey,
)
from nardis.game_logic.player import Player, QueuedRoute
from nardis.game_logic.resource import Resource
from nardis.game_logic.route import Route, RouteCargo, RoutePlanCargo, RouteState
from nardis.game_logic.state import GameData, TurnContext
from nardis.game_logic.stock import BuyOutValue, Stock

__all__ = [
    "DEFAULT_SAVE",
    "AdjustedTrain",
    "BuyOutValue",
    "BuyableRoute",
    "City",
    "CityResource",
    "EntityNotFoundError",
    "Finance",
    "FinanceHistory",
    "GameConfiguration",
    "GameData",
    "GameDefaults",
    "GameNotFoundError",
    "GameOverrides",
    "GameStatus",
    "GameStorage",
    "Identifiable",
    "InMemoryKeyValueStore",
    "InsufficientStartCitiesError",
    "KeyValueStore",
    "Nardis",
    "NardisError",
    "NetWorthDivisors",
    "Opponent",
    "Player",
    "PotentialRoute",
    "QueuedRoute",
    "Resource",
    "ResourcePoolExhaustedError",
    "Route",
    "RouteCargo",
    "RouteCargoError",
    "RouteCost",
    "RoutePlanCargo",
    "RouteState",
    "SavePlan",
    "SavedGame",
    "Serializable",
    "Stock",
    "StockConstants",
    "StorageKey",
    "Train",
    "TurnAdvanceable",
    "TurnContext",
    "Upgrade",
    "WorldGenerator",
    "build_game_configuration",
    "evaluate_save_plan",
    "find_by_id",
    "generate_world",
    "get_default_game_configuration",
    "resolve_by_id",
]
