"""Async engine and session factory construction."""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from integration_service.config.schemas import DatabaseConfig
from integration_service.infrastructure.logging.logger import get_logger
from integration_service.infrastructure.persistence.sql.models import Base

logger = get_logger(__name__)


def create_engine(config: DatabaseConfig) -> AsyncEngine:
    """
    Create the async engine for the local store.

    In-memory SQLite databases share a single connection so that every
    session sees the same tables.
    """
    kwargs = {"echo": config.echo, "pool_pre_ping": config.pool_pre_ping}
    if config.url.startswith("sqlite") and ":memory:" in config.url:
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    logger.debug("Creating database engine", url=config.url)
    return create_async_engine(config.url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with explicit commits and no expiry on commit."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")
