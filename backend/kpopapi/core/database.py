"""KPop Idol API Database Configuration - Async SQLAlchemy.

Each application owns its engine and session factory (``app.state.engine``
and ``app.state.session_maker``), built from the Settings it was created
with.
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from kpopapi.core.config import Settings
from kpopapi.core.logging import get_logger

logger = get_logger("database")

# Base class for models
Base = declarative_base()


def build_engine(config: Settings) -> AsyncEngine:
    """Create the async engine; pool sizing only applies to server databases."""
    if config.database_url.startswith("sqlite"):
        # One shared connection, otherwise each :memory: connection is a new database
        return create_async_engine(config.database_url, poolclass=StaticPool)
    return create_async_engine(
        config.database_url,
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_recycle=config.db_pool_recycle,
        pool_pre_ping=True,  # Verify connection before use
        echo=config.debug and config.log_level == "DEBUG",
    )


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get a session from the running application's engine."""
    async with request.app.state.session_maker() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            # Includes asyncio.CancelledError so a cancelled request still rolls back
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine) -> None:
    """Create missing tables and insert the starter idols.

    There is no migration tooling; both steps are safe to repeat.
    """
    from kpopapi.models import Idol  # noqa: F401
    from kpopapi.services.idol import seed_idols

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with build_session_maker(engine)() as session:
        added = await seed_idols(session)
        await session.commit()
    if added:
        logger.info(f"Seeded {added} idol(s)")


async def check_db_connection(session_maker: async_sessionmaker[AsyncSession]) -> bool:
    """Check if database is reachable."""
    try:
        async with session_maker() as session:
            await session.execute(text("SELECT 1"))
            return True
    except (OSError, ConnectionError) as e:
        logger.debug(f"Database connection check failed: {e}")
        return False
    except Exception as e:
        logger.warning(f"Unexpected error checking database connection: {e}")
        return False
