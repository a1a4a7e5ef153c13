import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app import database, models  # noqa: F401
from app.main import app


@pytest.fixture()
def test_engine(monkeypatch):
    # Fresh in-memory database per test; the app picks it up through app.database.
    engine = database.make_engine("sqlite+aiosqlite://")
    monkeypatch.setattr(database, "engine", engine)
    monkeypatch.setattr(
        database,
        "SessionLocal",
        async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False),
    )
    yield engine


@pytest.fixture()
def client(test_engine):
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture()
async def db():
    engine = database.make_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture()
async def file_sessions(tmp_path):
    # File-backed so separate sessions get separate connections.
    engine = database.make_engine(f"sqlite+aiosqlite:///{tmp_path / 'poker.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()
