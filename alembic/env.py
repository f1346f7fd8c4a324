"""Alembic environment wired to the CodeCollab schema metadata."""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context

from codecollab_backend.database import BaseSchema, DatabaseService, get_settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = BaseSchema.metadata


def _database_url() -> str:
    """Prefer ``alembic -x database_url=...`` over the application settings."""
    overrides = context.get_x_argument(as_dictionary=True)
    return overrides.get("database_url") or get_settings().database_url


def run_migrations_offline() -> None:
    """Emit SQL for the configured dialect without connecting."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    database = DatabaseService(_database_url())
    try:
        with database.engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
                render_as_batch=connection.dialect.name == "sqlite",
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        database.engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
