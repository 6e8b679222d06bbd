"""Player repository implementation"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from inkarena.domain.entities.player import Player
from inkarena.domain.errors import PlayerNotFoundError
from inkarena.domain.interfaces.player_repository import PlayerRepositoryInterface
from inkarena.domain.value_objects.game_score import GameScore
from inkarena.domain.value_objects.player_color import PlayerColor
from inkarena.infrastructure.database.models import PlayerRecord


class PlayerRepository(PlayerRepositoryInterface):
    """Async SQLAlchemy implementation of player repository"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, player: Player) -> Player:
        """Register a player; saving a known id overwrites it"""
        db_player = await self.db.merge(
            PlayerRecord(
                id=player.id,
                name=player.name,
                color=player.color.value,
                last_score=player.score.painted_area,
            )
        )
        await self.db.commit()
        await self.db.refresh(db_player)

        return self._to_entity(db_player)

    async def find_by_id(self, player_id: str) -> Optional[Player]:
        """Get player by ID"""
        stmt = select(PlayerRecord).where(PlayerRecord.id == player_id)
        result = await self.db.execute(stmt)
        db_player = result.scalar_one_or_none()
        return self._to_entity(db_player) if db_player else None

    async def find_all(self) -> List[Player]:
        """Get every registered player"""
        stmt = select(PlayerRecord).order_by(PlayerRecord.created_at)
        result = await self.db.execute(stmt)
        return [self._to_entity(db_player) for db_player in result.scalars().all()]

    async def update(self, player: Player) -> Player:
        """Update player"""
        stmt = select(PlayerRecord).where(PlayerRecord.id == player.id)
        result = await self.db.execute(stmt)
        db_player = result.scalar_one_or_none()

        if not db_player:
            raise PlayerNotFoundError(f"Player {player.id} not found")

        db_player.name = player.name
        db_player.color = player.color.value
        db_player.last_score = player.score.painted_area

        await self.db.commit()

        return self._to_entity(db_player)

    async def delete(self, player_id: str) -> None:
        """Delete player"""
        stmt = select(PlayerRecord).where(PlayerRecord.id == player_id)
        result = await self.db.execute(stmt)
        db_player = result.scalar_one_or_none()

        if db_player:
            await self.db.delete(db_player)
            await self.db.commit()

    def _to_entity(self, db_player: PlayerRecord) -> Player:
        """Convert database model to domain entity"""
        return Player(
            id=db_player.id,
            name=db_player.name,
            color=PlayerColor(db_player.color),
            score=GameScore.capped(db_player.last_score or 0.0),
        )
