"""Save slot database schema."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from nardis.database.base import BaseSchema


class SaveSlotSchema(BaseSchema):
    """SQLAlchemy model holding one encoded blob of a saved game."""

    __tablename__ = "save_slots"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
