"""Game session repository implementation"""

from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from inkarena.domain.entities.game_session import GameSession, SessionStatus
from inkarena.domain.errors import GameSessionNotFoundError
from inkarena.domain.interfaces.game_session_repository import GameSessionRepositoryInterface
from inkarena.infrastructure.database.models import GameSessionRecord
from inkarena.infrastructure.repositories.serialization import (
    session_from_payload,
    session_to_payload,
)


class GameSessionRepository(GameSessionRepositoryInterface):
    """Async SQLAlchemy implementation of game session repository"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, session: GameSession) -> GameSession:
        """Persist a new game session"""
        db_session = GameSessionRecord(
            id=session.id,
            status=session.status.value,
            duration=session.duration,
            payload=session_to_payload(session),
        )

        self.db.add(db_session)
        await self.db.commit()
        await self.db.refresh(db_session)

        return self._to_entity(db_session)

    async def find_by_id(self, session_id: str) -> Optional[GameSession]:
        """Get session by ID"""
        db_session = await self._get_record(session_id)
        return self._to_entity(db_session) if db_session else None

    async def find_active(self) -> List[GameSession]:
        """Get all active sessions, newest first"""
        stmt = (
            select(GameSessionRecord)
            .where(GameSessionRecord.status == SessionStatus.ACTIVE.value)
            .order_by(desc(GameSessionRecord.created_at))
        )
        result = await self.db.execute(stmt)
        return [self._to_entity(db_session) for db_session in result.scalars().all()]

    async def update(self, session: GameSession) -> GameSession:
        """Replace the stored snapshot"""
        db_session = await self._get_record(session.id)

        if not db_session:
            raise GameSessionNotFoundError(f"Game session {session.id} not found")

        db_session.status = session.status.value
        db_session.duration = session.duration
        db_session.payload = session_to_payload(session)

        await self.db.commit()

        return self._to_entity(db_session)

    async def delete(self, session_id: str) -> None:
        """Delete session"""
        db_session = await self._get_record(session_id)

        if db_session:
            await self.db.delete(db_session)
            await self.db.commit()

    async def _get_record(self, session_id: str) -> Optional[GameSessionRecord]:
        # Rows loaded earlier by this session may be stale
        stmt = (
            select(GameSessionRecord)
            .where(GameSessionRecord.id == session_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, db_session: GameSessionRecord) -> GameSession:
        """Convert database model to domain entity"""
        return session_from_payload(
            db_session.id, db_session.status, db_session.duration, db_session.payload
        )
