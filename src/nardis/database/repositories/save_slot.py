"""Repository helpers for working with save slots."""

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from nardis.database.schemas import SaveSlotSchema


class SaveSlotRepository:
    """Encapsulates persistence operations for :class:`SaveSlotSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_key(self, key: str) -> SaveSlotSchema | None:
        """Return the slot stored under *key*."""
        return self._session.get(SaveSlotSchema, key)

    def list_keys(self) -> list[str]:
        """Return every stored key in alphabetical order."""
        stmt = select(SaveSlotSchema.key).order_by(SaveSlotSchema.key)
        return list(self._session.scalars(stmt))

    def upsert(self, key: str, value: str) -> SaveSlotSchema:
        """Store *value* under *key*, replacing any previous value."""
        slot = self.get_by_key(key)
        if slot is None:
            slot = SaveSlotSchema(key=key, value=value)
            self._session.add(slot)
        else:
            slot.value = value
        self._session.flush()
        return slot

    def delete(self, key: str) -> bool:
        """Remove the slot stored under *key*."""
        stmt = delete(SaveSlotSchema).where(SaveSlotSchema.key == key)
        result = self._session.execute(stmt)
        return bool(result.rowcount)
