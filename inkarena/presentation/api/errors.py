"""Mapping of domain errors onto HTTP responses"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from inkarena.domain.errors import (
    GameError,
    GameSessionNotFoundError,
    GameValidationError,
    PlayerNotFoundError,
)
from inkarena.presentation.schemas.common_schemas import ErrorResponse

logger = logging.getLogger(__name__)


def http_status_for(error: GameError) -> int:
    """400 for rejected input, 404 for unknown ids, 409 for any other state conflict"""
    if isinstance(error, GameValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, (GameSessionNotFoundError, PlayerNotFoundError)):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_409_CONFLICT


async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    """Render a GameError as an ErrorResponse body"""
    status_code = http_status_for(exc)
    logger.warning(f"{request.method} {request.url.path} rejected ({exc.code}): {exc.message}")

    body = ErrorResponse(message=exc.message, error_code=exc.code)
    return JSONResponse(status_code=status_code, content=body.model_dump())
