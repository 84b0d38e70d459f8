"""Key-value store adapter persisting saved games through SQLAlchemy."""

from __future__ import annotations

from nardis.database.repositories import SaveSlotRepository
from nardis.database.service import DatabaseService


class DatabaseKeyValueStore:
    """Stores every blob of a saved game as a row of ``save_slots``."""

    def __init__(self, database: DatabaseService | None = None) -> None:
        self._database = database or DatabaseService()

    def save(self, key: str, value: str) -> None:
        """Persist *value* under *key*, replacing any previous value."""
        with self._database.session() as session:
            SaveSlotRepository(session).upsert(str(key), value)

    def load(self, key: str) -> str | None:
        """Return the value stored under *key* or ``None``."""
        with self._database.session() as session:
            slot = SaveSlotRepository(session).get_by_key(str(key))
            return slot.value if slot is not None else None

    def remove(self, key: str) -> None:
        """Delete the value stored under *key* if present."""
        with self._database.session() as session:
            SaveSlotRepository(session).delete(str(key))


__all__ = ["DatabaseKeyValueStore"]
