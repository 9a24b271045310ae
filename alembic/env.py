"""Alembic environment for the registry schema.

Migrations are hand-written PostgreSQL DDL (op.execute); the ORM models are
attached as target_metadata only so ``alembic check`` can report drift
between them and the migrated database.

The database URL comes from settings; ``alembic -x url=... upgrade head``
overrides it for one-off runs against another database.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine

import src.reg_common.db_models  # noqa: F401
import src.reg_market.infrastructure.db_models  # noqa: F401
import src.reg_member.infrastructure.db_models  # noqa: F401
import src.reg_token.infrastructure.db_models  # noqa: F401
from config.settings import settings
from src.reg_common.database import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("url", settings.DATABASE_URL)


def run_migrations_offline() -> None:
    """Emit the DDL as SQL script instead of executing it."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):  # type: ignore[no-untyped-def]
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = create_async_engine(_database_url())
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
