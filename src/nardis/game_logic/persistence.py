"""Persistence abstractions for saving and restoring a running game.

A game is stored as a handful of opaque string blobs in a key-value store.
Each blob is a base64 encoded JSON array of entity records; references
between entities are ids, resolved again while the game is rebuilt. Concrete
stores (in-memory, database-backed, etc.) only need to satisfy
:class:`KeyValueStore`.
"""

from __future__ import annotations

import base64
import logging
from enum import StrEnum
from typing import Protocol

from pydantic import BaseModel, Field, TypeAdapter

from nardis.game_logic.city import City
from nardis.game_logic.equipment import Train, Upgrade
from nardis.game_logic.errors import GameNotFoundError
from nardis.game_logic.opponent import Opponent
from nardis.game_logic.player import Player, PlayerRecord
from nardis.game_logic.resource import Resource
from nardis.game_logic.state import GameData
from nardis.game_logic.stock import Stock
from nardis.shared.enums import PlayerType

logger = logging.getLogger(__name__)

ACTIVE_GAME_FLAG = "1"

_RECORDS = TypeAdapter(list[str])


class StorageKey(StrEnum):
    """Fixed keys every blob of a saved game is stored under."""

    TRAINS = "MuZq5yMeusLEOuMhEVq2MC7QehQDZanN"
    UPGRADES = "ks4n0sZBHpRthXKQGs0VJhUeujxOnOa0"
    RESOURCES = "44KBCanpVD8Wqmc9A9GUQFDlGrVY6D1H"
    CITIES = "pNWKr11c1EzJQUgl9JzwBme4OpBUlftw"
    PLAYERS = "GQnsccS7Gmb9kmZoP4lakp3TIPGvwf07"
    CURRENT_PLAYER = "rDkvsVkOzCBZOyhAKF8bljAVgclTiCAC"
    TURN = "QeBo7Miy3RIPHh8mbxWdqoAXny8TsLuF"
    HAS_ACTIVE_GAME = "0nfKAvFjzJY8H1h9tacz9zzdf0RLlcbl"
    STOCKS = "Xw3hT7pLk2RqN9vBc5sJd8mYf1gZa6Ue"


class KeyValueStore(Protocol):
    """Protocol describing where the blobs of a saved game live."""

    def save(self, key: str, value: str) -> None:
        """Persist *value* under *key*, replacing any previous value."""

    def load(self, key: str) -> str | None:
        """Return the value stored under *key* or ``None``."""

    def remove(self, key: str) -> None:
        """Delete the value stored under *key* if present."""


class InMemoryKeyValueStore:
    """Trivial in-memory implementation of :class:`KeyValueStore`."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def save(self, key: str, value: str) -> None:
        """Store *value* keyed by *key*."""
        self._values[key] = value

    def load(self, key: str) -> str | None:
        """Return the stored value for *key* if available."""
        return self._values.get(key)

    def remove(self, key: str) -> None:
        """Forget the value stored under *key*."""
        self._values.pop(key, None)

    def keys(self) -> tuple[str, ...]:
        """Return every key currently stored."""
        return tuple(self._values)


class StockEntry(BaseModel):
    """A stock record paired with the id of its owning player."""

    key: str
    stock: str


class SavedGame(BaseModel):
    """Everything needed to resume a game, rebuilt from storage."""

    data: GameData
    players: list[Player]
    stocks: dict[str, Stock] = Field(default_factory=dict)
    current_player_id: str
    turn: int = Field(..., ge=1)


def encode(value: str) -> str:
    """Return *value* encoded for storage."""
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def decode(value: str) -> str:
    """Return the text encoded by :func:`encode`."""
    return base64.b64decode(value.encode("ascii")).decode("utf-8")


class GameStorage:
    """Reads and writes saved games through a :class:`KeyValueStore`."""

    def __init__(self, store: KeyValueStore | None = None) -> None:
        self._store = store if store is not None else InMemoryKeyValueStore()

    @property
    def store(self) -> KeyValueStore:
        """Return the underlying key-value store."""
        return self._store

    def has_active_game(self) -> bool:
        """Return ``True`` when a saved game is available."""
        return self._store.load(StorageKey.HAS_ACTIVE_GAME) == ACTIVE_GAME_FLAG

    def save(
        self,
        data: GameData,
        players: list[Player],
        stocks: dict[str, Stock],
        current_player_id: str,
        turn: int,
    ) -> None:
        """Write every blob of the game described by the arguments."""
        self._store.save(StorageKey.HAS_ACTIVE_GAME, ACTIVE_GAME_FLAG)
        self._save_records(StorageKey.TRAINS, [e.deconstruct() for e in data.trains])
        self._save_records(
            StorageKey.RESOURCES, [e.deconstruct() for e in data.resources]
        )
        self._save_records(
            StorageKey.UPGRADES, [e.deconstruct() for e in data.upgrades]
        )
        self._save_records(StorageKey.CITIES, [e.deconstruct() for e in data.cities])
        self._save_records(StorageKey.PLAYERS, [e.deconstruct() for e in players])
        self._save_records(
            StorageKey.STOCKS,
            [
                StockEntry(key=key, stock=stock.deconstruct()).model_dump_json()
                for key, stock in stocks.items()
            ],
        )
        self._store.save(StorageKey.CURRENT_PLAYER, encode(current_player_id))
        self._store.save(StorageKey.TURN, encode(str(turn)))
        logger.debug("Saved game at turn %d", turn)

    def load(self) -> SavedGame:
        """Rebuild the saved game, resolving every reference by id."""
        if not self.has_active_game():
            msg = "Cannot restore a game from empty storage."
            raise GameNotFoundError(msg)
        resources = [
            Resource.from_json(raw) for raw in self._load_records(StorageKey.RESOURCES)
        ]
        trains = [Train.from_json(raw) for raw in self._load_records(StorageKey.TRAINS)]
        upgrades = [
            Upgrade.from_json(raw) for raw in self._load_records(StorageKey.UPGRADES)
        ]
        cities = [
            City.from_json(raw, resources)
            for raw in self._load_records(StorageKey.CITIES)
        ]
        stocks: dict[str, Stock] = {}
        for raw in self._load_records(StorageKey.STOCKS):
            entry = StockEntry.model_validate_json(raw)
            stocks[entry.key] = Stock.from_json(entry.stock)
        players: list[Player] = []
        for raw in self._load_records(StorageKey.PLAYERS):
            record = PlayerRecord.model_validate_json(raw)
            kind = Opponent if record.player_type is PlayerType.COMPUTER else Player
            players.append(kind.from_json(raw, cities, trains, resources, upgrades))
        return SavedGame(
            data=GameData(
                cities=cities, resources=resources, trains=trains, upgrades=upgrades
            ),
            players=players,
            stocks=stocks,
            current_player_id=decode(self._require(StorageKey.CURRENT_PLAYER)),
            turn=int(decode(self._require(StorageKey.TURN))),
        )

    def clear(self) -> None:
        """Remove every blob of the saved game."""
        logger.debug("Clearing %d storage keys", len(StorageKey))
        for key in StorageKey:
            self._store.remove(key)

    def _save_records(self, key: StorageKey, records: list[str]) -> None:
        self._store.save(key, encode(_RECORDS.dump_json(records).decode("utf-8")))

    def _load_records(self, key: StorageKey) -> list[str]:
        return _RECORDS.validate_json(decode(self._require(key)))

    def _require(self, key: StorageKey) -> str:
        value = self._store.load(key)
        if value is None:
            msg = f"Saved game is missing the {key.name.lower()} entry."
            raise GameNotFoundError(msg)
        return value


__all__ = [
    "ACTIVE_GAME_FLAG",
    "GameStorage",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SavedGame",
    "StockEntry",
    "StorageKey",
    "decode",
    "encode",
]
