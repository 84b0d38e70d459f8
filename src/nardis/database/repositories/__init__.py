"""Repositories encapsulating database access."""

from nardis.database.repositories.save_slot import SaveSlotRepository

__all__ = ["SaveSlotRepository"]
