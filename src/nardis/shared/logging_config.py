"""Explicit logging configuration handed to the game at construction."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

ROOT_LOGGER_NAME = "nardis"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LoggingConfiguration(BaseModel):
    """Controls whether and how the ``nardis`` loggers emit records.

    The default configuration is a no-op: the package logger only carries a
    :class:`logging.NullHandler`, so nothing is printed unless a caller opts in.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    level: str = Field(default="INFO")
    format: str = Field(default=DEFAULT_FORMAT)

    def apply(self) -> logging.Logger:
        """Configure and return the package root logger."""
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        if not self.enabled:
            return logger
        logger.setLevel(self.level.upper())
        if not any(
            getattr(handler, "_nardis_managed", False) for handler in logger.handlers
        ):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(self.format))
            handler._nardis_managed = True  # type: ignore[attr-defined]
            logger.addHandler(handler)
        return logger


__all__ = ["DEFAULT_FORMAT", "ROOT_LOGGER_NAME", "LoggingConfiguration"]
