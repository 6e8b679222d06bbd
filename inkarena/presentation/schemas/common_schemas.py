"""Common schemas for API responses"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema"""

    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "message": "Player is not currently active",
                "error_code": "PLAYER_NOT_ACTIVE",
                "details": None,
            }
        }


class HealthCheckResponse(BaseModel):
    """Health check response schema"""

    status: str = "healthy"
    app: str
    version: str
    timestamp: str

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "app": "Ink Arena",
                "version": "0.1.0",
                "timestamp": "2024-01-01T12:00:00+00:00",
            }
        }


class ConnectionStatusResponse(BaseModel):
    """WebSocket connection counts"""

    total_connections: int
    games: List[str]
    connections_per_game: Dict[str, int]
