"""
Happy Thoughts API: Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory and the per-request session
       dependency.
How:   One engine per process; one AsyncSession per request, committed when
       the handler returns and rolled back when it raises.
Who:   Routes receive sessions through `Depends(get_db_session)`; the
       lifespan handler calls `create_tables()` and `dispose_engine()`.

Connection pooling:
    PostgreSQL (asyncpg) uses a QueuePool sized by DB_POOL_SIZE and
    DB_MAX_OVERFLOW. SQLite (aiosqlite) keeps SQLAlchemy's default pool for
    the URL, since in-memory databases use a StaticPool that takes no sizing.
"""

from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import DateTime
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from happythoughts.config import settings


def _engine_options() -> Dict[str, Any]:
    """Keyword arguments for `create_async_engine` matching the configured backend."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if settings.is_sqlite:
        options["connect_args"] = {"check_same_thread": False}
        return options
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


engine = create_async_engine(settings.database_url, **_engine_options())

# expire_on_commit=False: response schemas read ORM attributes after commit.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base shared by every ORM model (and Alembic's metadata)."""
    pass


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp that always round-trips as UTC.

    PostgreSQL stores the offset itself; SQLite drops it, so values read
    back without tzinfo are marked UTC again.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    1. Opens a session from the factory
    2. Yields it to the route handler
    3. Commits if the handler returned normally
    4. Rolls back and re-raises if anything raised
    5. Always closes the session

    Because the rollback covers every exception, a request that fails
    halfway (for example a rejected update) never leaves a partial write.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_tables() -> None:
    """Creates all tables known to `Base.metadata` (idempotent)."""
    # Models must be imported so their tables register on the metadata.
    from happythoughts.models import thought, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Closes every pooled connection. Called on application shutdown."""
    await engine.dispose()
