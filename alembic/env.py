"""Alembic environment for the ``save_slots`` schema of saved games."""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from nardis.database import BaseSchema, SaveSlotSchema, get_settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

settings = get_settings()
config.set_main_option("sqlalchemy.url", settings.database_url)

target_metadata = BaseSchema.metadata

# SQLite cannot alter tables in place; batch mode recreates them instead.
render_as_batch = settings.database_url.startswith("sqlite")

if SaveSlotSchema.__tablename__ not in target_metadata.tables:
    msg = f"{SaveSlotSchema.__tablename__} is not registered on the metadata."
    raise RuntimeError(msg)


def run_migrations_offline() -> None:
    """Emit the save slot migrations as SQL without a connection."""
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=render_as_batch,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply the save slot migrations against the configured database."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=render_as_batch,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
