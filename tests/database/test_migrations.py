"""Alembic migration tests against a throwaway SQLite database."""

from __future__ import annotations

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from nardis.database import DatabaseKeyValueStore, DatabaseService
from nardis.settings import get_settings

ALEMBIC_DIR = Path(__file__).resolve().parents[2] / "alembic"


def test_upgrade_creates_the_save_slots_table(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("NARDIS_DATABASE_URL", url)
    get_settings.cache_clear()
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))

    command.upgrade(config, "head")

    database = DatabaseService(url)
    assert "save_slots" in inspect(database.engine).get_table_names()
    store = DatabaseKeyValueStore(database)
    store.save("turn", "MQ==")
    assert store.load("turn") == "MQ=="

    command.downgrade(config, "base")

    assert "save_slots" not in inspect(database.engine).get_table_names()
