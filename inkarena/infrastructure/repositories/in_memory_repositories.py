"""Dict-backed repositories for tests and single-process runs"""

from typing import Dict, List, Optional

from inkarena.domain.entities.game_session import GameSession
from inkarena.domain.entities.player import Player
from inkarena.domain.errors import GameSessionNotFoundError, PlayerNotFoundError
from inkarena.domain.interfaces.game_session_repository import GameSessionRepositoryInterface
from inkarena.domain.interfaces.player_repository import PlayerRepositoryInterface


class InMemoryGameSessionRepository(GameSessionRepositoryInterface):
    def __init__(self):
        self.sessions: Dict[str, GameSession] = {}

    async def save(self, session: GameSession) -> GameSession:
        self.sessions[session.id] = session
        return session

    async def find_by_id(self, session_id: str) -> Optional[GameSession]:
        return self.sessions.get(session_id)

    async def find_active(self) -> List[GameSession]:
        return [session for session in self.sessions.values() if session.is_active]

    async def update(self, session: GameSession) -> GameSession:
        if session.id not in self.sessions:
            raise GameSessionNotFoundError(f"Game session {session.id} not found")
        self.sessions[session.id] = session
        return session

    async def delete(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)


class InMemoryPlayerRepository(PlayerRepositoryInterface):
    def __init__(self):
        self.players: Dict[str, Player] = {}

    async def save(self, player: Player) -> Player:
        self.players[player.id] = player
        return player

    async def find_by_id(self, player_id: str) -> Optional[Player]:
        return self.players.get(player_id)

    async def find_all(self) -> List[Player]:
        return list(self.players.values())

    async def update(self, player: Player) -> Player:
        if player.id not in self.players:
            raise PlayerNotFoundError(f"Player {player.id} not found")
        self.players[player.id] = player
        return player

    async def delete(self, player_id: str) -> None:
        self.players.pop(player_id, None)
