"""SQLAlchemy schemas."""

from nardis.database.schemas.save_slot import SaveSlotSchema

__all__ = ["SaveSlotSchema"]
