"""Pushes game events to WebSocket subscribers"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import WebSocket

from inkarena.domain.entities.game_session import GameSession
from inkarena.domain.services.game_engine import GameOutcome, MoveOutcome, ShotOutcome
from inkarena.infrastructure.services.websocket_manager import WebSocketManager, websocket_manager
from inkarena.presentation.schemas.game_schemas import (
    GameEndResponse,
    GameSessionResponse,
    MoveResponse,
    ShotResponse,
)

logger = logging.getLogger(__name__)


class GameEventNotificationService:
    """Sends ``ink_placed``, ``player_moved`` and ``game_ended`` events

    Notification failures are logged and never reach the caller; the game
    state has already been stored when they are sent.
    """

    def __init__(self, manager: WebSocketManager = websocket_manager) -> None:
        self.manager = manager

    async def notify_ink_placed(self, outcome: ShotOutcome) -> None:
        await self._notify(
            outcome.session.id, "ink_placed", ShotResponse.from_outcome(outcome).model_dump(mode="json")
        )

    async def notify_player_moved(self, outcome: MoveOutcome) -> None:
        await self._notify(
            outcome.session.id, "player_moved", MoveResponse.from_outcome(outcome).model_dump(mode="json")
        )

    async def notify_game_ended(self, outcome: GameOutcome) -> None:
        await self._notify(
            outcome.session.id, "game_ended", GameEndResponse.from_outcome(outcome).model_dump(mode="json")
        )

    async def send_connection_status(self, websocket: WebSocket, session: GameSession) -> None:
        """Send the current session snapshot to a new subscriber"""
        message = self.build_message(
            "connection_established",
            {
                "session": GameSessionResponse.from_entity(session).model_dump(mode="json"),
                "active_connections": self.manager.get_connection_count(session.id),
            },
        )
        await websocket.send_json(message)

    @staticmethod
    def build_message(message_type: str, data: Any) -> Dict[str, Any]:
        return {
            "type": message_type,
            "data": data,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    async def _notify(self, game_id: str, message_type: str, data: Dict[str, Any]) -> None:
        try:
            connection_count = self.manager.get_connection_count(game_id)
            await self.manager.send_to_game(game_id, self.build_message(message_type, data))
            logger.info(f"Sent {message_type} for game {game_id} to {connection_count} clients")
        except Exception as e:
            logger.error(f"Error sending {message_type} notification for game {game_id}: {e}")
