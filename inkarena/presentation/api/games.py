"""Game session API endpoints"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status

from inkarena.application.use_cases.game_use_cases import (
    EndGameUseCase,
    GetActiveSessionsUseCase,
    GetCoverageUseCase,
    GetGameSessionUseCase,
    ShootInkUseCase,
    StartGameUseCase,
    UpdatePlayerPositionUseCase,
)
from inkarena.core.config import settings
from inkarena.core.dependencies import (
    get_game_engine,
    get_game_repository,
    get_notification_service,
    get_player_repository,
)
from inkarena.domain.errors import GameError
from inkarena.domain.interfaces.game_session_repository import GameSessionRepositoryInterface
from inkarena.domain.interfaces.player_repository import PlayerRepositoryInterface
from inkarena.domain.services.game_engine import GameEngine
from inkarena.infrastructure.services.game_event_notification_service import (
    GameEventNotificationService,
)
from inkarena.presentation.schemas.common_schemas import ErrorResponse
from inkarena.presentation.schemas.game_schemas import (
    CoverageResponse,
    EndGameRequest,
    GameEndResponse,
    GameSessionResponse,
    MoveResponse,
    PositionUpdateRequest,
    ShotRequest,
    ShotResponse,
    StartGameRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    404: {"model": ErrorResponse, "description": "Unknown game or player"},
    409: {"model": ErrorResponse, "description": "Action does not fit the game state"},
}


@router.post(
    "/start",
    response_model=GameSessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Start new game",
    description="Register two players and start a timed match",
)
async def start_game(
    request: StartGameRequest,
    game_repository: GameSessionRepositoryInterface = Depends(get_game_repository),
    player_repository: PlayerRepositoryInterface = Depends(get_player_repository),
    engine: GameEngine = Depends(get_game_engine),
) -> GameSessionResponse:
    """Start a new game session"""
    try:
        players = [player.to_entity() for player in request.players]
        use_case = StartGameUseCase(game_repository, player_repository, engine)

        session = await use_case.execute(players, request.duration)
        logger.info(f"Started game {session.id} with players {[p.name for p in session.players]}")

        return GameSessionResponse.from_entity(session)

    except GameError:
        raise
    except Exception as e:
        logger.error(f"Error starting game: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while starting the game",
        )


@router.post(
    "/{session_id}/shots",
    response_model=ShotResponse,
    responses=ERROR_RESPONSES,
    summary="Shoot ink",
    description="Place an ink mark; nearby opponents are stunned and overlapping marks resolved",
)
async def shoot_ink(
    request: ShotRequest,
    session_id: str = Path(..., description="Game session ID"),
    game_repository: GameSessionRepositoryInterface = Depends(get_game_repository),
    player_repository: PlayerRepositoryInterface = Depends(get_player_repository),
    engine: GameEngine = Depends(get_game_engine),
    notification_service: GameEventNotificationService = Depends(get_notification_service),
) -> ShotResponse:
    """Apply a shot from one player"""
    try:
        use_case = ShootInkUseCase(game_repository, player_repository, engine)
        size = settings.default_mark_size if request.size is None else request.size

        outcome = await use_case.execute(
            session_id,
            request.player_id,
            request.position.to_position(),
            size,
            sent_at=request.timestamp,
        )
        logger.info(
            f"Player {request.player_id} placed mark {outcome.placed_mark.id} in game {session_id}"
            f" (merged={outcome.merged}, stunned={len(outcome.effects)})"
        )

        await notification_service.notify_ink_placed(outcome)
        return ShotResponse.from_outcome(outcome)

    except GameError:
        raise
    except Exception as e:
        logger.error(f"Error placing ink in game {session_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while placing ink",
        )


@router.post(
    "/{session_id}/players/{player_id}/position",
    response_model=MoveResponse,
    responses=ERROR_RESPONSES,
    summary="Update player position",
    description="Move a player; walking into opposing ink stuns",
)
async def update_player_position(
    request: PositionUpdateRequest,
    session_id: str = Path(..., description="Game session ID"),
    player_id: str = Path(..., description="Player ID"),
    game_repository: GameSessionRepositoryInterface = Depends(get_game_repository),
    player_repository: PlayerRepositoryInterface = Depends(get_player_repository),
    engine: GameEngine = Depends(get_game_engine),
    notification_service: GameEventNotificationService = Depends(get_notification_service),
) -> MoveResponse:
    """Move a player inside a game"""
    try:
        use_case = UpdatePlayerPositionUseCase(game_repository, player_repository, engine)

        outcome = await use_case.execute(
            session_id, player_id, request.position.to_position(), sent_at=request.timestamp
        )

        if outcome.effects:
            logger.info(f"Player {player_id} walked into ink in game {session_id}")
        await notification_service.notify_player_moved(outcome)
        return MoveResponse.from_outcome(outcome)

    except GameError:
        raise
    except Exception as e:
        logger.error(f"Error moving player {player_id} in game {session_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while updating the player position",
        )


@router.post(
    "/{session_id}/end",
    response_model=GameEndResponse,
    responses=ERROR_RESPONSES,
    summary="End game",
    description="Finish an active game and compute final standings",
)
async def end_game(
    request: Optional[EndGameRequest] = None,
    session_id: str = Path(..., description="Game session ID"),
    game_repository: GameSessionRepositoryInterface = Depends(get_game_repository),
    player_repository: PlayerRepositoryInterface = Depends(get_player_repository),
    engine: GameEngine = Depends(get_game_engine),
    notification_service: GameEventNotificationService = Depends(get_notification_service),
) -> GameEndResponse:
    """End a game session"""
    try:
        use_case = EndGameUseCase(game_repository, player_repository, engine)

        outcome = await use_case.execute(
            session_id, sent_at=request.timestamp if request else None
        )
        winner = outcome.winner.name if outcome.winner else "draw"
        logger.info(f"Game {session_id} ended, winner: {winner}")

        await notification_service.notify_game_ended(outcome)
        return GameEndResponse.from_outcome(outcome)

    except GameError:
        raise
    except Exception as e:
        logger.error(f"Error ending game {session_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while ending the game",
        )


@router.get(
    "/active",
    response_model=List[GameSessionResponse],
    summary="List active games",
)
async def get_active_games(
    game_repository: GameSessionRepositoryInterface = Depends(get_game_repository),
) -> List[GameSessionResponse]:
    """Get every active game session"""
    try:
        sessions = await GetActiveSessionsUseCase(game_repository).execute()
        return [GameSessionResponse.from_entity(session) for session in sessions]

    except Exception as e:
        logger.error(f"Error fetching active games: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while fetching active games",
        )


@router.get(
    "/{session_id}",
    response_model=GameSessionResponse,
    responses=ERROR_RESPONSES,
    summary="Get game",
)
async def get_game(
    session_id: str = Path(..., description="Game session ID"),
    game_repository: GameSessionRepositoryInterface = Depends(get_game_repository),
) -> GameSessionResponse:
    """Get a game session with its players and marks"""
    session = await GetGameSessionUseCase(game_repository).execute(session_id)
    return GameSessionResponse.from_entity(session)


@router.get(
    "/{session_id}/coverage",
    response_model=CoverageResponse,
    responses=ERROR_RESPONSES,
    summary="Get live coverage",
)
async def get_coverage(
    session_id: str = Path(..., description="Game session ID"),
    game_repository: GameSessionRepositoryInterface = Depends(get_game_repository),
    engine: GameEngine = Depends(get_game_engine),
) -> CoverageResponse:
    """Coverage per player and in total, plus remaining time"""
    snapshot = await GetCoverageUseCase(game_repository, engine).execute(session_id)
    return CoverageResponse.from_snapshot(session_id, snapshot)
