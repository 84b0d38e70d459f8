"""Capability protocols implemented independently by every entity type."""

from __future__ import annotations

from collections.abc import Iterable  # noqa: TC003
from typing import Protocol, TypeVar, runtime_checkable

from nardis.game_logic.errors import EntityNotFoundError


@runtime_checkable
class Identifiable(Protocol):
    """Entity with a stable identity compared by id."""

    id: str
    name: str

    def equals(self, other: Identifiable) -> bool:
        """Return ``True`` when *other* is the same logical entity."""


@runtime_checkable
class Serializable(Protocol):
    """Entity that can be flattened into a canonical JSON record."""

    def deconstruct(self) -> str:
        """Return the JSON record describing this entity."""


@runtime_checkable
class TurnAdvanceable(Protocol):
    """Entity advanced once per turn by the game loop."""

    def handle_turn(self, context: object) -> None:
        """Apply a single turn worth of behaviour."""


_E = TypeVar("_E", bound=Identifiable)


def find_by_id(items: Iterable[_E], identifier: str) -> _E | None:
    """Return the entity from *items* with *identifier*, if any."""
    for item in items:
        if item.id == identifier:
            return item
    return None


def resolve_by_id(items: Iterable[_E], identifier: str, kind: str) -> _E:
    """Return the entity from *items* with *identifier* or fail loudly."""
    item = find_by_id(items, identifier)
    if item is None:
        raise EntityNotFoundError(kind, identifier)
    return item


__all__ = [
    "Identifiable",
    "Serializable",
    "TurnAdvanceable",
    "find_by_id",
    "resolve_by_id",
]
