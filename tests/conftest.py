"""Shared fixtures: players, engine and an in-memory SQLite database"""

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inkarena.domain.entities.game_session import GameSession
from inkarena.domain.entities.player import Player
from inkarena.domain.services.game_engine import GameEngine
from inkarena.domain.value_objects.player_color import PlayerColor
from inkarena.domain.value_objects.position import Position
from inkarena.infrastructure.database import models  # noqa: F401
from inkarena.infrastructure.database.connection import Base

START = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

# Create async test database
SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
test_engine = create_async_engine(
    SQLALCHEMY_DATABASE_URL,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)
TestingAsyncSessionLocal = sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


async def override_get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """Override async database dependency for testing"""
    async with TestingAsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@pytest_asyncio.fixture
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield a session, drop tables"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestingAsyncSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def red_player() -> Player:
    return Player.create("Alice", PlayerColor.RED, position=Position(0.0, 0.0, 0.0))


@pytest.fixture
def blue_player() -> Player:
    return Player.create("Bob", PlayerColor.BLUE, position=Position(1.5, 0.0, 1.5))


@pytest.fixture
def engine() -> GameEngine:
    return GameEngine()


@pytest.fixture
def active_session(engine: GameEngine, red_player: Player, blue_player: Player) -> GameSession:
    """Three minute game started at START"""
    return engine.start([red_player, blue_player], duration=180, now=START)
