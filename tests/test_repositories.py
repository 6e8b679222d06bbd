"""Tests for the SQLAlchemy repositories on aiosqlite"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from inkarena.domain.entities.game_session import GameSession
from inkarena.domain.entities.player import Player
from inkarena.domain.errors import GameSessionNotFoundError, PlayerNotFoundError
from inkarena.domain.services.game_engine import GameEngine
from inkarena.domain.value_objects.game_score import GameScore
from inkarena.domain.value_objects.position import Position
from inkarena.infrastructure.database.connection import to_async_url
from inkarena.infrastructure.repositories.game_session_repository import GameSessionRepository
from inkarena.infrastructure.repositories.player_repository import PlayerRepository

START = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestGameSessionRepository:
    @pytest.mark.asyncio
    async def test_round_trip_keeps_marks_and_timestamps(
        self,
        async_session: AsyncSession,
        engine: GameEngine,
        active_session: GameSession,
        red_player: Player,
        blue_player: Player,
    ) -> None:
        session = active_session.update_player(blue_player.with_position(Position(1.2, 0.0, 0.0)))
        session = engine.shoot_ink(
            session, red_player.id, Position.origin(), 1.0, now=START, sent_at=START
        ).session
        repository = GameSessionRepository(async_session)

        await repository.save(session)
        loaded = await repository.find_by_id(session.id)

        assert loaded == session
        assert loaded.started_at.tzinfo is not None
        assert loaded.last_intent_at == START
        assert loaded.player_by_id(blue_player.id).stunned_until == session.player_by_id(
            blue_player.id
        ).stunned_until

    @pytest.mark.asyncio
    async def test_update_and_find_active(
        self, async_session: AsyncSession, engine: GameEngine, active_session: GameSession
    ) -> None:
        repository = GameSessionRepository(async_session)
        await repository.save(active_session)

        assert [session.id for session in await repository.find_active()] == [active_session.id]

        finished = engine.end_game(active_session, now=START + timedelta(seconds=30)).session
        await repository.update(finished)

        assert await repository.find_active() == []
        assert (await repository.find_by_id(active_session.id)).is_finished

    @pytest.mark.asyncio
    async def test_find_by_id_sees_writes_from_other_sessions(
        self, async_session: AsyncSession, engine: GameEngine, active_session: GameSession
    ) -> None:
        repository = GameSessionRepository(async_session)
        await repository.save(active_session)
        assert (await repository.find_by_id(active_session.id)).is_active

        async with AsyncSession(async_session.bind, expire_on_commit=False) as other:
            finished = engine.end_game(active_session, now=START + timedelta(seconds=30)).session
            await GameSessionRepository(other).update(finished)

        assert (await repository.find_by_id(active_session.id)).is_finished

    @pytest.mark.asyncio
    async def test_update_unknown_session(
        self, async_session: AsyncSession, active_session: GameSession
    ) -> None:
        with pytest.raises(GameSessionNotFoundError):
            await GameSessionRepository(async_session).update(active_session)

    @pytest.mark.asyncio
    async def test_delete(self, async_session: AsyncSession, active_session: GameSession) -> None:
        repository = GameSessionRepository(async_session)
        await repository.save(active_session)

        await repository.delete(active_session.id)

        assert await repository.find_by_id(active_session.id) is None


class TestPlayerRepository:
    @pytest.mark.asyncio
    async def test_save_and_find(self, async_session: AsyncSession, red_player: Player) -> None:
        repository = PlayerRepository(async_session)

        await repository.save(red_player)
        loaded = await repository.find_by_id(red_player.id)

        assert loaded.id == red_player.id
        assert loaded.name == "Alice"
        assert loaded.color == red_player.color
        assert await repository.find_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_update_score(self, async_session: AsyncSession, red_player: Player) -> None:
        repository = PlayerRepository(async_session)
        await repository.save(red_player)

        updated = await repository.update(red_player.with_score(GameScore(42.5)))

        assert updated.score == GameScore(42.5)
        assert [player.id for player in await repository.find_all()] == [red_player.id]

    @pytest.mark.asyncio
    async def test_update_unknown_player(self, async_session: AsyncSession, red_player: Player) -> None:
        with pytest.raises(PlayerNotFoundError):
            await PlayerRepository(async_session).update(red_player)


def test_async_url_mapping() -> None:
    assert to_async_url("sqlite:///./ink_arena.db") == "sqlite+aiosqlite:///./ink_arena.db"
    assert to_async_url("sqlite+aiosqlite:///:memory:") == "sqlite+aiosqlite:///:memory:"
