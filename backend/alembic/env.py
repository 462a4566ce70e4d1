"""
Alembic environment for the Happy Thoughts schema.

Migrations run online only, over the same async engine URL the API uses
(`DATABASE_URL` via happythoughts.config). SQLite gets batch mode so ALTERs
work there too.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from happythoughts.config import settings
from happythoughts.database import Base
from happythoughts.models import thought, user  # noqa: F401  (register tables)

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _migrate(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=Base.metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations() -> None:
    engine = create_async_engine(settings.database_url, poolclass=NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(_migrate)
    await engine.dispose()


asyncio.run(run_migrations())
