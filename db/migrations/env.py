"""Alembic environment for the crm schema.

Reads DATABASE_URL through Settings (so .env is honored) and reuses the
application's engine builder, which rejects non-asyncpg URLs.
"""
import asyncio
from logging.config import fileConfig

from alembic import context

from db.connection import build_engine
from db.models import Base
from settings import Settings

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
settings = Settings.from_env()
if not settings.database_url:
    raise RuntimeError(
        "DATABASE_URL must be set to run Alembic migrations. "
        "Copy .env.example to .env and configure your database credentials."
    )


def include_crm_only(name, type_, parent_names):
    """Autogenerate filter: skip every schema except crm."""
    if type_ == "schema":
        return name == "crm"
    return True


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        include_schemas=True,
        include_name=include_crm_only,
        **kwargs,
    )


def run_offline() -> None:
    """Emit SQL for the migrations without connecting."""
    _configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_on_connection(connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_online() -> None:
    engine = build_engine(settings)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_on_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
