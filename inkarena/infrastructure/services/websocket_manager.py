"""WebSocket connection manager grouping spectators by game"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


class WebSocketManager:
    """Tracks connections per game session and fans messages out to them"""

    def __init__(self) -> None:
        # Active connections keyed by game session id
        self.connections: Dict[str, Set[WebSocket]] = {}
        # Game and player of each connection
        self.connection_info: Dict[WebSocket, Dict[str, Any]] = {}

    async def connect(self, websocket: WebSocket, game_id: str, player_id: Optional[str] = None) -> None:
        """Accept a connection and subscribe it to a game"""
        await websocket.accept()

        self.connections.setdefault(game_id, set()).add(websocket)
        self.connection_info[websocket] = {"game_id": game_id, "player_id": player_id}
        logger.info(f"WebSocket connected to game {game_id}, player_id: {player_id}")

    def disconnect(self, websocket: WebSocket) -> None:
        """Forget a connection"""
        info = self.connection_info.pop(websocket, None)
        if info is None:
            return

        game_id = info["game_id"]
        subscribers = self.connections.get(game_id)
        if subscribers is not None:
            subscribers.discard(websocket)
            if not subscribers:
                del self.connections[game_id]

        logger.info(f"WebSocket disconnected from game {game_id}, player_id: {info['player_id']}")

    async def send_to_game(self, game_id: str, message: Dict[str, Any]) -> None:
        """Send a message to every subscriber of a game"""
        await self._send_all(self.connections.get(game_id, set()).copy(), message)

    async def send_to_player(self, player_id: str, message: Dict[str, Any]) -> None:
        """Send a message to every connection opened by a player"""
        await self._send_all(self.get_player_connections(player_id), message)

    async def broadcast(self, message: Dict[str, Any]) -> None:
        """Send a message to every connection"""
        await self._send_all(list(self.connection_info), message)

    def get_connection_count(self, game_id: Optional[str] = None) -> int:
        """Number of connections for one game, or overall"""
        if game_id:
            return len(self.connections.get(game_id, set()))
        return len(self.connection_info)

    def get_player_connections(self, player_id: str) -> List[WebSocket]:
        return [
            websocket
            for websocket, info in self.connection_info.items()
            if info["player_id"] == player_id
        ]

    async def _send_all(self, connections: Iterable[WebSocket], message: Dict[str, Any]) -> None:
        payload = json.dumps(message)
        disconnected = set()

        for connection in connections:
            try:
                await connection.send_text(payload)
            except WebSocketDisconnect:
                disconnected.add(connection)
            except Exception as e:
                logger.error(f"Error sending message to WebSocket: {e}")
                disconnected.add(connection)

        # Clean up disconnected connections
        for connection in disconnected:
            self.disconnect(connection)


# Global WebSocket manager instance
websocket_manager = WebSocketManager()
