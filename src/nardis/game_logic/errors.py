"""Fatal error types raised by the simulation.

Declined player actions are reported by returning ``False``; the exceptions
below signal states the simulation cannot continue from.
"""

from __future__ import annotations


class NardisError(RuntimeError):
    """Base class for unrecoverable simulation errors."""


class InsufficientStartCitiesError(NardisError):
    """Raised when a world lacks enough start cities to seat every player."""

    def __init__(self, available: int, required: int) -> None:
        self.available = available
        self.required = required
        super().__init__(
            f"Found {available} start cities but {required} players need seating."
        )


class ResourcePoolExhaustedError(NardisError):
    """Raised when no eligible resource is left to add to a city basket."""


class RouteCargoError(NardisError):
    """Raised when a route plan references a resource its origin lacks."""


class GameNotFoundError(NardisError):
    """Raised when restoring a game that was never saved."""


class EntityNotFoundError(NardisError):
    """Raised when a serialized reference cannot be resolved by id."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"No {kind} with id '{identifier}' exists.")


__all__ = [
    "EntityNotFoundError",
    "GameNotFoundError",
    "InsufficientStartCitiesError",
    "NardisError",
    "ResourcePoolExhaustedError",
    "RouteCargoError",
]
