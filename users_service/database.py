import logging
from collections.abc import Awaitable, Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from users_service.config import settings
from users_service.middleware import install_query_counter

logger = logging.getLogger(__name__)

# Module-level engine variable allows tests to override with a test engine.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

# Register the per-request SQL query counter on the production engine.
install_query_counter(engine)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def connect() -> Callable[[], Awaitable[None]]:
    """
    Open a connection to surface mis-configuration at startup and return
    the matching ``shutdown`` coroutine function.

    The caller owns sequencing; this module knows nothing about the rest
    of the process lifecycle.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Database connected: %s", engine.url.render_as_string(hide_password=True))

    async def shutdown() -> None:
        await engine.dispose()
        logger.info("Database connection pool disposed")

    return shutdown
