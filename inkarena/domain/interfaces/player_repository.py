"""Player repository interface"""

from abc import ABC, abstractmethod
from typing import List, Optional

from inkarena.domain.entities.player import Player


class PlayerRepositoryInterface(ABC):
    """Interface for player repository"""

    @abstractmethod
    async def save(self, player: Player) -> Player:
        """Register a player"""
        pass

    @abstractmethod
    async def find_by_id(self, player_id: str) -> Optional[Player]:
        """Get player by ID"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Player]:
        """Get every registered player"""
        pass

    @abstractmethod
    async def update(self, player: Player) -> Player:
        """Update player"""
        pass

    @abstractmethod
    async def delete(self, player_id: str) -> None:
        """Delete player"""
        pass
