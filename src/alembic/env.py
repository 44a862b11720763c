"""Alembic environment.

Migrations run synchronously through psycopg2 against DATABASE_MIGRATIONS_URL
when set (a role allowed to alter tables and policies), else DATABASE_URL.
"""

from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import create_engine, pool
from sqlmodel import SQLModel

from alembic import context
from src.searchmatic.core.config import get_settings

# Registers the tables on SQLModel.metadata for autogenerate
from src.searchmatic.models import EnumValue, Project, Study  # noqa: F401

config = context.config
if config.config_file_name and Path(config.config_file_name).exists():
    fileConfig(config.config_file_name)


def migration_url() -> str:
    settings = get_settings()
    url = settings.database_migrations_url or settings.database_url
    return url.replace("+asyncpg", "")


def _configure(**options) -> None:
    context.configure(
        target_metadata=SQLModel.metadata,
        compare_type=True,
        compare_server_default=True,
        **options,
    )


if context.is_offline_mode():
    _configure(url=migration_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = create_engine(migration_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            _configure(connection=connection)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()
