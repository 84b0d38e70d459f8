"""Database connectivity helpers and configuration objects."""

from nardis.database.base import BaseSchema
from nardis.database.repositories import SaveSlotRepository
from nardis.database.schemas import SaveSlotSchema
from nardis.database.service import DatabaseService
from nardis.database.store import DatabaseKeyValueStore
from nardis.settings import NardisSettings, get_settings

__all__ = [
    "BaseSchema",
    "DatabaseKeyValueStore",
    "DatabaseService",
    "NardisSettings",
    "SaveSlotRepository",
    "SaveSlotSchema",
    "get_settings",
]
