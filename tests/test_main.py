"""Basic async tests for the main application"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from inkarena.main import app, end_expired_games, shutdown_event


@pytest.mark.asyncio
async def test_root_endpoint() -> None:
    """Test root endpoint"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "Welcome to Ink Arena!" in data["message"]
        assert data["version"] == "0.1.0"


@pytest.mark.asyncio
async def test_health_check() -> None:
    """Test health check endpoint"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["app"] == "Ink Arena"
        assert data["version"] == "0.1.0"
        assert "timestamp" in data


@pytest.mark.asyncio
async def test_openapi_json() -> None:
    """Test that OpenAPI JSON lists the game routes"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/openapi.json")
        assert response.status_code == 200
        data = response.json()
        assert data["info"]["title"] == "Ink Arena"
        assert "/games/start" in data["paths"]
        assert "/games/{session_id}/shots" in data["paths"]


@pytest.mark.asyncio
async def test_end_expired_games_notifies_subscribers() -> None:
    """Expired games found by the sweep are announced as game_ended"""
    outcome = MagicMock()
    outcome.session.id = "game-1"

    with patch("inkarena.main.EndExpiredGamesUseCase") as use_case_class, patch(
        "inkarena.main.GameEventNotificationService"
    ) as service_class:
        use_case_class.return_value.execute = AsyncMock(return_value=[outcome])
        service_class.return_value.notify_game_ended = AsyncMock()

        ended = await end_expired_games()

    assert ended == 1
    service_class.return_value.notify_game_ended.assert_awaited_once_with(outcome)


@pytest.mark.asyncio
async def test_shutdown_waits_for_expiry_sweep() -> None:
    """Shutdown cancels the background sweep and waits until it has stopped"""
    sweep = asyncio.create_task(asyncio.sleep(3600))

    with patch("inkarena.main.expiry_task", sweep):
        await shutdown_event()

    assert sweep.done()
    assert sweep.cancelled()
