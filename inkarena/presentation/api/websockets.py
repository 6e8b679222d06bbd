"""WebSocket endpoints for live game updates"""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from inkarena.application.use_cases.game_use_cases import GetGameSessionUseCase
from inkarena.domain.errors import GameSessionNotFoundError
from inkarena.infrastructure.database.connection import get_async_db
from inkarena.infrastructure.repositories.game_session_repository import GameSessionRepository
from inkarena.infrastructure.services.game_event_notification_service import (
    GameEventNotificationService,
)
from inkarena.infrastructure.services.websocket_manager import websocket_manager
from inkarena.presentation.schemas.common_schemas import ConnectionStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/games/{session_id}")
async def websocket_game_endpoint(
    websocket: WebSocket,
    session_id: str,
    player_id: Optional[str] = Query(None, description="Optional ID of the connecting player"),
) -> None:
    """
    WebSocket endpoint for one game's events

    Subscribers receive:
    - ink_placed after every accepted shot
    - player_moved after every position update
    - game_ended with the final standings
    """
    db_generator = get_async_db()
    db = await db_generator.__anext__()
    try:
        get_session = GetGameSessionUseCase(GameSessionRepository(db))
        try:
            session = await get_session.execute(session_id)
        except GameSessionNotFoundError:
            logger.info(f"Rejected WebSocket for unknown game {session_id}")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        notification_service = GameEventNotificationService(websocket_manager)
        try:
            await websocket_manager.connect(websocket, session_id, player_id)
            await notification_service.send_connection_status(websocket, session)

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json(
                        notification_service.build_message("error", {"message": "Invalid JSON format"})
                    )
                    continue

                await handle_client_message(
                    websocket, message, session_id, get_session, notification_service
                )

        except WebSocketDisconnect:
            logger.info(f"Game WebSocket disconnected for game {session_id}, player: {player_id}")
        except Exception as e:
            logger.error(f"Error in game WebSocket connection: {e}")
        finally:
            websocket_manager.disconnect(websocket)
    finally:
        await db.close()


async def handle_client_message(
    websocket: WebSocket,
    message: Dict[str, Any],
    session_id: str,
    get_session: GetGameSessionUseCase,
    notification_service: GameEventNotificationService,
) -> None:
    """Handle messages received from WebSocket clients"""
    message_type = message.get("type", "") if isinstance(message, dict) else ""

    if message_type == "ping":
        await websocket.send_json(
            notification_service.build_message("pong", {"message": "Connection alive"})
        )

    elif message_type == "request_state":
        session = await get_session.execute(session_id)
        await notification_service.send_connection_status(websocket, session)

    else:
        await websocket.send_json(
            notification_service.build_message(
                "error", {"message": f"Unknown message type: {message_type}"}
            )
        )


@router.get("/connections/status", response_model=ConnectionStatusResponse)
async def get_websocket_status() -> ConnectionStatusResponse:
    """Get current WebSocket connection status"""
    return ConnectionStatusResponse(
        total_connections=websocket_manager.get_connection_count(),
        games=list(websocket_manager.connections.keys()),
        connections_per_game={
            game_id: len(connections) for game_id, connections in websocket_manager.connections.items()
        },
    )
