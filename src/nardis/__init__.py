"""Nardis simulation core package wiring and entrypoints."""

import logging

from nardis.main import run
from nardis.settings import NardisSettings, get_settings

logging.getLogger(__name__).addHandler(logging.NullHandler())

main = run

__all__ = ["NardisSettings", "get_settings", "main", "run"]
