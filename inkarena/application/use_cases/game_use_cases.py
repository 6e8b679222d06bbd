"""Game session use cases

Each use case resolves ids through the repositories, hands the session value
to the pure engine and persists the returned value. Errors are raised before
anything is written. Use cases that change a session hold that session's lock
from the read to the write.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Dict, List, Optional, Sequence

from inkarena.domain.entities.game_session import GameSession
from inkarena.domain.entities.player import Player
from inkarena.domain.errors import GameSessionNotFoundError, PlayerNotFoundError
from inkarena.domain.interfaces.game_session_repository import GameSessionRepositoryInterface
from inkarena.domain.interfaces.player_repository import PlayerRepositoryInterface
from inkarena.domain.services.game_engine import (
    CoverageSnapshot,
    GameEngine,
    GameOutcome,
    MoveOutcome,
    ShotOutcome,
)
from inkarena.domain.value_objects.position import Position


class SessionLocks:
    """One asyncio.Lock per game session, created on first use"""

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}

    @asynccontextmanager
    async def hold(self, session_id: str) -> AsyncIterator[None]:
        """Hold the session's lock; the lock of an unknown session is dropped"""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()

        try:
            async with lock:
                yield
        except GameSessionNotFoundError:
            self.discard(session_id)
            raise

    def discard(self, session_id: str) -> None:
        self._locks.pop(session_id, None)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._locks


# Shared by every request and the expiry sweep of this process
session_locks = SessionLocks()


async def _get_session(
    game_repository: GameSessionRepositoryInterface, session_id: str
) -> GameSession:
    session = await game_repository.find_by_id(session_id)
    if not session:
        raise GameSessionNotFoundError(f"Game session {session_id} not found")
    return session


async def _ensure_player(player_repository: PlayerRepositoryInterface, player_id: str) -> None:
    player = await player_repository.find_by_id(player_id)
    if not player:
        raise PlayerNotFoundError(f"Player {player_id} not found")


class StartGameUseCase:
    """Use case for starting a game session"""

    def __init__(
        self,
        game_repository: GameSessionRepositoryInterface,
        player_repository: PlayerRepositoryInterface,
        engine: GameEngine,
    ):
        self.game_repository = game_repository
        self.player_repository = player_repository
        self.engine = engine

    async def execute(
        self, players: Sequence[Player], duration: Optional[float] = None
    ) -> GameSession:
        """Validate, register players and persist the started session"""
        session = self.engine.start(players, duration)

        saved = await self.game_repository.save(session)
        for player in session.players:
            await self.player_repository.save(player)

        return saved


class ShootInkUseCase:
    """Use case for placing ink"""

    def __init__(
        self,
        game_repository: GameSessionRepositoryInterface,
        player_repository: PlayerRepositoryInterface,
        engine: GameEngine,
        locks: SessionLocks = session_locks,
    ):
        self.game_repository = game_repository
        self.player_repository = player_repository
        self.engine = engine
        self.locks = locks

    async def execute(
        self,
        session_id: str,
        player_id: str,
        position: Position,
        size: float,
        now: Optional[datetime] = None,
        sent_at: Optional[datetime] = None,
    ) -> ShotOutcome:
        """Apply a shot to the stored session"""
        async with self.locks.hold(session_id):
            session = await _get_session(self.game_repository, session_id)
            await _ensure_player(self.player_repository, player_id)

            outcome = self.engine.shoot_ink(session, player_id, position, size, now, sent_at)

            await self.game_repository.update(outcome.session)
        return outcome


class UpdatePlayerPositionUseCase:
    """Use case for a player position update"""

    def __init__(
        self,
        game_repository: GameSessionRepositoryInterface,
        player_repository: PlayerRepositoryInterface,
        engine: GameEngine,
        locks: SessionLocks = session_locks,
    ):
        self.game_repository = game_repository
        self.player_repository = player_repository
        self.engine = engine
        self.locks = locks

    async def execute(
        self,
        session_id: str,
        player_id: str,
        position: Position,
        now: Optional[datetime] = None,
        sent_at: Optional[datetime] = None,
    ) -> MoveOutcome:
        """Move a player inside the stored session"""
        async with self.locks.hold(session_id):
            session = await _get_session(self.game_repository, session_id)
            await _ensure_player(self.player_repository, player_id)

            outcome = self.engine.move_player(session, player_id, position, now, sent_at)

            await self.game_repository.update(outcome.session)
        return outcome


class EndGameUseCase:
    """Use case for finishing a game session"""

    def __init__(
        self,
        game_repository: GameSessionRepositoryInterface,
        player_repository: PlayerRepositoryInterface,
        engine: GameEngine,
        locks: SessionLocks = session_locks,
    ):
        self.game_repository = game_repository
        self.player_repository = player_repository
        self.engine = engine
        self.locks = locks

    async def execute(
        self,
        session_id: str,
        now: Optional[datetime] = None,
        sent_at: Optional[datetime] = None,
    ) -> GameOutcome:
        """Finish the session and store final scores"""
        async with self.locks.hold(session_id):
            session = await _get_session(self.game_repository, session_id)
            outcome = await self.finish(session, now, sent_at)

        self.locks.discard(session_id)
        return outcome

    async def finish(
        self,
        session: GameSession,
        now: Optional[datetime] = None,
        sent_at: Optional[datetime] = None,
    ) -> GameOutcome:
        """End an already loaded session; the caller holds its lock"""
        outcome = self.engine.end_game(session, now, sent_at)

        await self.game_repository.update(outcome.session)
        for player in outcome.session.players:
            await self.player_repository.update(player)

        return outcome


class EndExpiredGamesUseCase:
    """Use case for finishing sessions whose clock ran out (background task)"""

    def __init__(
        self,
        game_repository: GameSessionRepositoryInterface,
        player_repository: PlayerRepositoryInterface,
        engine: GameEngine,
        locks: SessionLocks = session_locks,
    ):
        self.game_repository = game_repository
        self.player_repository = player_repository
        self.engine = engine
        self.locks = locks

    async def execute(self, now: Optional[datetime] = None) -> List[GameOutcome]:
        """End every active session with no time left"""
        end_game = EndGameUseCase(
            self.game_repository, self.player_repository, self.engine, self.locks
        )

        outcomes = []
        for candidate in await self.game_repository.find_active():
            if not self.engine.should_end(candidate, now):
                continue

            async with self.locks.hold(candidate.id):
                # Re-read: a shot or an explicit end may have landed meanwhile
                session = await _get_session(self.game_repository, candidate.id)
                if session.is_expired(now):
                    outcomes.append(await end_game.finish(session, now))

            self.locks.discard(candidate.id)
        return outcomes


class GetGameSessionUseCase:
    """Use case for reading a game session"""

    def __init__(self, game_repository: GameSessionRepositoryInterface):
        self.game_repository = game_repository

    async def execute(self, session_id: str) -> GameSession:
        return await _get_session(self.game_repository, session_id)


class GetActiveSessionsUseCase:
    """Use case for listing active sessions"""

    def __init__(self, game_repository: GameSessionRepositoryInterface):
        self.game_repository = game_repository

    async def execute(self) -> List[GameSession]:
        return await self.game_repository.find_active()


class GetCoverageUseCase:
    """Use case for the live coverage projection"""

    def __init__(self, game_repository: GameSessionRepositoryInterface, engine: GameEngine):
        self.game_repository = game_repository
        self.engine = engine

    async def execute(self, session_id: str, now: Optional[datetime] = None) -> CoverageSnapshot:
        session = await _get_session(self.game_repository, session_id)
        return self.engine.coverage(session, now)
