"""FastAPI dependencies for the game engine, repositories and notifications"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkarena.core.config import settings
from inkarena.domain.interfaces.game_session_repository import GameSessionRepositoryInterface
from inkarena.domain.interfaces.player_repository import PlayerRepositoryInterface
from inkarena.domain.services.game_engine import GameEngine
from inkarena.domain.value_objects.game_rules import GameRules
from inkarena.infrastructure.database.connection import get_async_db
from inkarena.infrastructure.repositories.game_session_repository import GameSessionRepository
from inkarena.infrastructure.repositories.player_repository import PlayerRepository
from inkarena.infrastructure.services.game_event_notification_service import (
    GameEventNotificationService,
)


@lru_cache()
def get_game_engine() -> GameEngine:
    """Engine configured from settings; built once per process"""
    return GameEngine(
        rules=GameRules.from_settings(settings),
        field_area=settings.field_area,
        min_win_margin=settings.min_win_margin,
        tie_break_by_mark_count=settings.tie_break_by_mark_count,
    )


async def get_game_repository(
    db: AsyncSession = Depends(get_async_db),
) -> GameSessionRepositoryInterface:
    return GameSessionRepository(db)


async def get_player_repository(
    db: AsyncSession = Depends(get_async_db),
) -> PlayerRepositoryInterface:
    return PlayerRepository(db)


def get_notification_service() -> GameEventNotificationService:
    return GameEventNotificationService()
