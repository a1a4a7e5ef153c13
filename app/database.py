import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from app import config

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(url: str, echo: bool = False):
    """Build the async engine. In-memory SQLite shares one connection so every session sees the same data."""
    kwargs = {"echo": echo}
    if url.startswith("sqlite") and (":memory:" in url or url.endswith("://")):
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_async_engine(url, **kwargs)


# Created once per process; no connection is opened until the first query.
engine = make_engine(config.DATABASE_URL, echo=config.DB_ECHO)
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_models():
    from app import models  # noqa: F401

    # Looked up at call time so a replacement engine is honoured.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")


async def dispose_engine():
    await engine.dispose()


async def get_db():
    async with SessionLocal() as session:
        yield session
