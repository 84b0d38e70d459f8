"""Event logging primitives recorded while turns are processed."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class GameEvent(BaseModel):
    """Represents a single immutable notable occurrence in a game."""

    model_config = ConfigDict(frozen=True)

    turn: int = Field(..., ge=0)
    event_type: str = Field(..., min_length=1)
    message: str | None = None
    player_id: str | None = Field(default=None, min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class EventJournal:
    """Collects :class:`GameEvent` records grouped by turn."""

    def __init__(self) -> None:
        self._events: dict[int, list[GameEvent]] = {}

    def record(
        self,
        turn: int,
        event_type: str,
        message: str | None = None,
        *,
        player_id: str | None = None,
        **payload: Any,
    ) -> GameEvent:
        """Create, store and return an event for *turn*."""
        event = GameEvent(
            turn=turn,
            event_type=event_type,
            message=message,
            player_id=player_id,
            payload=payload,
        )
        self._events.setdefault(turn, []).append(event)
        return event

    def events_for_turn(self, turn: int) -> tuple[GameEvent, ...]:
        """Return every event recorded during *turn*."""
        return tuple(self._events.get(turn, ()))

    def all_events(self) -> tuple[GameEvent, ...]:
        """Return every recorded event ordered by turn."""
        return tuple(
            event for turn in sorted(self._events) for event in self._events[turn]
        )


__all__ = ["EventJournal", "GameEvent"]
