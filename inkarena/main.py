"""Ink Arena - FastAPI Game Application

A two-player area-control game: paint more of the field than your opponent
before the clock runs out.
"""

import asyncio
import contextlib
import logging
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inkarena.application.use_cases.game_use_cases import EndExpiredGamesUseCase
from inkarena.core.config import settings
from inkarena.core.dependencies import get_game_engine
from inkarena.domain.errors import GameError
from inkarena.infrastructure.database.connection import AsyncSessionLocal, create_tables
from inkarena.infrastructure.repositories.game_session_repository import GameSessionRepository
from inkarena.infrastructure.repositories.player_repository import PlayerRepository
from inkarena.infrastructure.services.game_event_notification_service import (
    GameEventNotificationService,
)
from inkarena.presentation.api.errors import game_error_handler

# Import routers
from inkarena.presentation.api.games import router as games_router
from inkarena.presentation.api.websockets import router as websockets_router
from inkarena.presentation.schemas.common_schemas import HealthCheckResponse

logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """Create and configure FastAPI application"""

    # Configure logging
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),  # Console output
        ],
    )

    # Set specific loggers
    logging.getLogger("inkarena").setLevel(settings.log_level.upper())
    logging.getLogger("uvicorn").setLevel(logging.INFO)

    app = FastAPI(
        title=settings.app_name,
        description="Two-player ink painting game: cover more of the field than your opponent",
        version=settings.version,
        debug=settings.debug,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GameError, game_error_handler)

    # Include routers
    app.include_router(games_router, prefix="/games", tags=["Games"])
    app.include_router(websockets_router, prefix="/ws", tags=["WebSocket Connections"])

    return app


async def end_expired_games() -> int:
    """End every active game whose clock ran out and notify subscribers"""
    async with AsyncSessionLocal() as db:
        use_case = EndExpiredGamesUseCase(
            GameSessionRepository(db), PlayerRepository(db), get_game_engine()
        )
        outcomes = await use_case.execute()

    notification_service = GameEventNotificationService()
    for outcome in outcomes:
        logger.info(f"Game {outcome.session.id} ran out of time")
        await notification_service.notify_game_ended(outcome)
    return len(outcomes)


async def expire_games_periodically(interval: float) -> None:
    """Background sweep; errors are logged and the loop keeps running"""
    while True:
        await asyncio.sleep(interval)
        try:
            await end_expired_games()
        except Exception as e:
            logger.error(f"Error ending expired games: {e}")


# Create FastAPI app
app = create_application()

expiry_task: Optional["asyncio.Task[None]"] = None


@app.on_event("startup")
async def startup_event() -> None:
    """Application startup event"""
    global expiry_task

    await create_tables()
    expiry_task = asyncio.create_task(expire_games_periodically(settings.expiry_check_interval))


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Application shutdown event"""
    if expiry_task is not None:
        expiry_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await expiry_task


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {
        "message": "Welcome to Ink Arena!",
        "description": "Paint more of the field than your opponent before time runs out",
        "version": settings.version,
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint"""
    return HealthCheckResponse(
        app=settings.app_name,
        version=settings.version,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


def start() -> None:
    """Start the server"""
    uvicorn.run(
        "inkarena.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.debug,
        log_level="info",
    )
