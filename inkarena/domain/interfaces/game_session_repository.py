"""Game session repository interface"""

from abc import ABC, abstractmethod
from typing import List, Optional

from inkarena.domain.entities.game_session import GameSession


class GameSessionRepositoryInterface(ABC):
    """Interface for game session repository"""

    @abstractmethod
    async def save(self, session: GameSession) -> GameSession:
        """Persist a new game session"""
        pass

    @abstractmethod
    async def find_by_id(self, session_id: str) -> Optional[GameSession]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def find_active(self) -> List[GameSession]:
        """Get all active sessions"""
        pass

    @abstractmethod
    async def update(self, session: GameSession) -> GameSession:
        """Update session"""
        pass

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Delete session"""
        pass
